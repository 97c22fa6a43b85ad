# openstock/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.catalog import Category
from openstock.models.product import Product
from openstock.schemas.catalog import CategoryCreate, CategoryOut, CategoryUpdate
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id

router = APIRouter(prefix="/categories", tags=["Categories"])


def _with_count(category: Category, count: int) -> CategoryOut:
    out = CategoryOut.model_validate(category)
    out.product_count = count
    return out


# Categories newest first, each with the number of products filed under it
@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_inventory_db)):
    categories = db.query(Category).order_by(Category.created_at.desc()).all()
    counts = dict(
        db.query(Product.category_id, func.count(Product.id))
        .group_by(Product.category_id)
        .all()
    )
    return [_with_count(c, counts.get(c.id, 0)) for c in categories]


@router.post("/", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, request: Request, db: Session = Depends(get_inventory_db)):
    if payload.parent_id:
        get_or_404(db, Category, payload.parent_id, "Parent category")

    category = Category(id=generate_id("cat"), **payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)

    write_log(db, action="CATEGORY_CREATE", resource="categories", ip=client_ip(request), meta={"id": category.id})
    return _with_count(category, 0)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str, payload: CategoryUpdate, request: Request, db: Session = Depends(get_inventory_db)
):
    category = get_or_404(db, Category, category_id, "Category")
    if payload.parent_id:
        if payload.parent_id == category.id:
            raise HTTPException(status_code=400, detail="A category cannot be its own parent")
        get_or_404(db, Category, payload.parent_id, "Parent category")

    apply_update(category, payload)
    db.commit()
    db.refresh(category)

    write_log(db, action="CATEGORY_UPDATE", resource="categories", ip=client_ip(request), meta={"id": category.id})
    count = db.query(Product).filter(Product.category_id == category.id).count()
    return _with_count(category, count)


@router.delete("/{category_id}")
def delete_category(category_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    category = get_or_404(db, Category, category_id, "Category")
    delete_or_409(db, category, "Category")
    write_log(db, action="CATEGORY_DELETE", resource="categories", ip=client_ip(request), meta={"id": category_id})
    return {"success": True}
