# openstock/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db, transaction
from openstock.models.catalog import Category, Supplier, Tax
from openstock.models.pricing import SellingPriceHistory, SupplierPrice, SupplierPriceHistory
from openstock.models.product import Product, ProductVariant
from openstock.models.settings import BusinessSettings
from openstock.routes.stock import apply_movement
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404, page_of
from openstock.utils.ids import generate_id
from openstock.utils.pricing import DEFAULT_MARGIN_PERCENT, derive_prices
import openstock.schemas.pricing as pricing_schemas
import openstock.schemas.product as product_schemas

router = APIRouter(prefix="/products", tags=["Products"])


# ---- HELPERS ----
def _default_margin(db: Session) -> float:
    settings_row = db.get(BusinessSettings, 1)
    if settings_row and settings_row.default_margin is not None:
        return settings_row.default_margin
    return DEFAULT_MARGIN_PERCENT


def _check_refs(db: Session, category_id=None, supplier_id=None, tax_id=None) -> None:
    if category_id:
        get_or_404(db, Category, category_id, "Category")
    if supplier_id:
        get_or_404(db, Supplier, supplier_id, "Supplier")
    if tax_id:
        get_or_404(db, Tax, tax_id, "Tax")


def _check_sku(db: Session, sku: Optional[str], product_id: Optional[str] = None) -> None:
    if not sku:
        return
    query = db.query(Product).filter(Product.sku == sku)
    if product_id:
        query = query.filter(Product.id != product_id)
    if query.first():
        raise HTTPException(status_code=400, detail="SKU already exists")


def _record_price(db: Session, product_id: str, price: float, variant_id: Optional[str] = None) -> None:
    db.add(SellingPriceHistory(id=generate_id("slh"), product_id=product_id, variant_id=variant_id, price=price))


def _reprice(obj, price_attr: str, changes: dict, default_margin: float) -> None:
    """Keep price and margin consistent after an update.

    A new selling price recomputes the margin; otherwise a new margin or cost
    recomputes the price from the (possibly unchanged) margin.
    """
    if price_attr in changes and changes[price_attr] is not None:
        price, margin = derive_prices(obj.cost_price, selling_price=changes[price_attr])
    elif "margin_percent" in changes or "cost_price" in changes:
        price, margin = derive_prices(obj.cost_price, margin_percent=obj.margin_percent, default_margin=default_margin)
    else:
        return
    setattr(obj, price_attr, price)
    obj.margin_percent = margin


# =========================
# PRODUCT LIST
# =========================
@router.get("/", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Search by name, SKU or barcode"),
    category_id: Optional[str] = Query(None),
    supplier_id: Optional[str] = Query(None),
    low_stock: bool = Query(False),
    active_only: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500),
    sort_by: str = Query("name"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_inventory_db),
):
    query = db.query(Product)

    if q:
        like = f"%{q}%"
        query = query.filter(
            (Product.name.ilike(like)) | (Product.sku.ilike(like)) | (Product.barcode.ilike(like))
        )
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if supplier_id:
        query = query.filter(Product.supplier_id == supplier_id)
    if low_stock:
        query = query.filter(Product.stock_quantity <= Product.stock_min, Product.is_active.is_(True))
    if active_only:
        query = query.filter(Product.is_active.is_(True))

    allowed = {
        "name": Product.name, "sku": Product.sku, "selling_price": Product.selling_price,
        "stock_quantity": Product.stock_quantity, "created_at": Product.created_at,
    }
    sort_col = allowed.get(sort_by.lower(), Product.name)
    query = query.order_by(sort_col.asc() if order == "asc" else sort_col.desc())

    return page_of(query, page, page_size)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_inventory_db)):
    return get_or_404(db, Product, product_id, "Product")


@router.post("/", response_model=product_schemas.ProductOut, status_code=201)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    _check_refs(db, payload.category_id, payload.supplier_id, payload.tax_id)
    _check_sku(db, payload.sku)

    selling_price, margin = derive_prices(
        payload.cost_price, payload.selling_price, payload.margin_percent, _default_margin(db)
    )
    data = payload.model_dump(exclude={"selling_price", "margin_percent", "stock_quantity"})
    product = Product(id=generate_id("prd"), selling_price=selling_price, margin_percent=margin, stock_quantity=0, **data)

    with transaction(db):
        db.add(product)
        db.flush()
        _record_price(db, product.id, selling_price)
        if payload.stock_quantity > 0:
            apply_movement(
                db, product, "in", payload.stock_quantity,
                unit_cost=payload.cost_price, reason="Opening stock",
            )
    db.refresh(product)

    write_log(
        db, action="PRODUCT_CREATE", resource="products", ip=client_ip(request),
        meta={"id": product.id, "sku": product.sku},
    )
    return product


# Partial update; stock_quantity only moves through stock movements
@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: str,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    product = get_or_404(db, Product, product_id, "Product")
    _check_refs(db, payload.category_id, payload.supplier_id, payload.tax_id)
    _check_sku(db, payload.sku, product.id)

    old_price = product.selling_price
    with transaction(db):
        changes = apply_update(product, payload)
        _reprice(product, "selling_price", changes, _default_margin(db))
        if product.selling_price != old_price:
            _record_price(db, product.id, product.selling_price)
    db.refresh(product)

    write_log(
        db, action="PRODUCT_UPDATE", resource="products", ip=client_ip(request),
        meta={"id": product.id, "fields": sorted(changes)},
    )
    return product


@router.delete("/{product_id}")
def delete_product(product_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    product = get_or_404(db, Product, product_id, "Product")
    delete_or_409(db, product, "Product")
    write_log(db, action="PRODUCT_DELETE", resource="products", ip=client_ip(request), meta={"id": product_id})
    return {"success": True}


@router.get("/{product_id}/price-history", response_model=List[pricing_schemas.PriceHistoryOut])
def product_price_history(product_id: str, db: Session = Depends(get_inventory_db)):
    get_or_404(db, Product, product_id, "Product")
    return (
        db.query(SellingPriceHistory)
        .filter(SellingPriceHistory.product_id == product_id)
        .order_by(SellingPriceHistory.created_at.desc())
        .all()
    )


# =========================
# VARIANTS
# =========================
def _get_variant(db: Session, product_id: str, variant_id: str) -> ProductVariant:
    variant = get_or_404(db, ProductVariant, variant_id, "Variant")
    if variant.product_id != product_id:
        raise HTTPException(status_code=404, detail="Variant not found")
    return variant


@router.get("/{product_id}/variants", response_model=List[product_schemas.VariantOut])
def list_variants(product_id: str, db: Session = Depends(get_inventory_db)):
    product = get_or_404(db, Product, product_id, "Product")
    return product.variants


@router.post("/{product_id}/variants", response_model=product_schemas.VariantOut, status_code=201)
def create_variant(
    product_id: str,
    payload: product_schemas.VariantCreate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    product = get_or_404(db, Product, product_id, "Product")
    _check_refs(db, supplier_id=payload.supplier_id, tax_id=payload.tax_id)

    price, margin = derive_prices(payload.cost_price, payload.price, payload.margin_percent, _default_margin(db))
    data = payload.model_dump(exclude={"price", "margin_percent", "stock_quantity"})
    variant = ProductVariant(
        id=generate_id("var"), product_id=product.id, price=price, margin_percent=margin, stock_quantity=0, **data
    )

    with transaction(db):
        db.add(variant)
        db.flush()
        _record_price(db, product.id, price, variant.id)
        if payload.stock_quantity > 0:
            apply_movement(
                db, product, "in", payload.stock_quantity,
                variant=variant, unit_cost=payload.cost_price, reason="Opening stock",
            )
    db.refresh(variant)

    write_log(
        db, action="VARIANT_CREATE", resource="products", ip=client_ip(request),
        meta={"id": variant.id, "product_id": product.id},
    )
    return variant


@router.put("/{product_id}/variants/{variant_id}", response_model=product_schemas.VariantOut)
def update_variant(
    product_id: str,
    variant_id: str,
    payload: product_schemas.VariantUpdate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    variant = _get_variant(db, product_id, variant_id)
    _check_refs(db, supplier_id=payload.supplier_id, tax_id=payload.tax_id)

    old_price = variant.price
    with transaction(db):
        changes = apply_update(variant, payload)
        _reprice(variant, "price", changes, _default_margin(db))
        if variant.price != old_price:
            _record_price(db, product_id, variant.price, variant.id)
    db.refresh(variant)

    write_log(db, action="VARIANT_UPDATE", resource="products", ip=client_ip(request), meta={"id": variant.id})
    return variant


@router.delete("/{product_id}/variants/{variant_id}")
def delete_variant(product_id: str, variant_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    variant = _get_variant(db, product_id, variant_id)
    delete_or_409(db, variant, "Variant")
    write_log(db, action="VARIANT_DELETE", resource="products", ip=client_ip(request), meta={"id": variant_id})
    return {"success": True}


# =========================
# SUPPLIER PRICES
# =========================
def _get_supplier_price(db: Session, product_id: str, price_id: str) -> SupplierPrice:
    sp = get_or_404(db, SupplierPrice, price_id, "Supplier price")
    if sp.product_id != product_id:
        raise HTTPException(status_code=404, detail="Supplier price not found")
    return sp


def _clear_preferred(db: Session, product_id: str, keep_id: str) -> None:
    db.query(SupplierPrice).filter(
        SupplierPrice.product_id == product_id,
        SupplierPrice.id != keep_id,
        SupplierPrice.is_preferred.is_(True),
    ).update({SupplierPrice.is_preferred: False}, synchronize_session=False)


@router.get("/{product_id}/supplier-prices", response_model=List[pricing_schemas.SupplierPriceOut])
def list_supplier_prices(product_id: str, db: Session = Depends(get_inventory_db)):
    get_or_404(db, Product, product_id, "Product")
    return (
        db.query(SupplierPrice)
        .filter(SupplierPrice.product_id == product_id)
        .order_by(SupplierPrice.is_preferred.desc(), SupplierPrice.price.asc())
        .all()
    )


@router.post("/{product_id}/supplier-prices", response_model=pricing_schemas.SupplierPriceOut, status_code=201)
def create_supplier_price(
    product_id: str,
    payload: pricing_schemas.SupplierPriceCreate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    get_or_404(db, Product, product_id, "Product")
    get_or_404(db, Supplier, payload.supplier_id, "Supplier")

    sp = SupplierPrice(id=generate_id("sp"), product_id=product_id, **payload.model_dump())
    with transaction(db):
        db.add(sp)
        db.flush()
        db.add(SupplierPriceHistory(id=generate_id("sph"), supplier_price_id=sp.id, price=sp.price))
        if sp.is_preferred:
            _clear_preferred(db, product_id, sp.id)
    db.refresh(sp)

    write_log(
        db, action="SUPPLIER_PRICE_CREATE", resource="products", ip=client_ip(request),
        meta={"id": sp.id, "product_id": product_id, "price": sp.price},
    )
    return sp


@router.put("/{product_id}/supplier-prices/{price_id}", response_model=pricing_schemas.SupplierPriceOut)
def update_supplier_price(
    product_id: str,
    price_id: str,
    payload: pricing_schemas.SupplierPriceUpdate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    sp = _get_supplier_price(db, product_id, price_id)
    old_price = sp.price

    with transaction(db):
        apply_update(sp, payload, exclude={"changed_by"})
        if sp.price != old_price:
            db.add(SupplierPriceHistory(
                id=generate_id("sph"), supplier_price_id=sp.id, price=sp.price, created_by=payload.changed_by
            ))
        if sp.is_preferred:
            _clear_preferred(db, product_id, sp.id)
    db.refresh(sp)

    write_log(
        db, action="SUPPLIER_PRICE_UPDATE", resource="products", ip=client_ip(request),
        meta={"id": sp.id, "old_price": old_price, "price": sp.price},
    )
    return sp


@router.delete("/{product_id}/supplier-prices/{price_id}")
def delete_supplier_price(product_id: str, price_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    sp = _get_supplier_price(db, product_id, price_id)
    delete_or_409(db, sp, "Supplier price")
    write_log(db, action="SUPPLIER_PRICE_DELETE", resource="products", ip=client_ip(request), meta={"id": price_id})
    return {"success": True}


@router.get(
    "/{product_id}/supplier-prices/{price_id}/history",
    response_model=List[pricing_schemas.PriceHistoryOut],
)
def supplier_price_history(product_id: str, price_id: str, db: Session = Depends(get_inventory_db)):
    sp = _get_supplier_price(db, product_id, price_id)
    return sp.history
