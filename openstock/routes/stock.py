# openstock/routes/stock.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db, transaction
from openstock.models.product import Product, ProductVariant
from openstock.models.stock import StockMovement
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import get_or_404, page_of
from openstock.utils.ids import generate_id
from openstock.utils.stock import StockError, compute_movement
import openstock.schemas.stock as stock_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock-movements", tags=["Stock"])


def _allow_negative(request: Request) -> bool:
    return bool(request.app.state.settings.ALLOW_NEGATIVE_STOCK)


def apply_movement(
    db: Session,
    product: Product,
    movement_type: str,
    quantity: int,
    *,
    variant: Optional[ProductVariant] = None,
    allow_negative: bool = False,
    unit_cost: Optional[float] = None,
    reference: Optional[str] = None,
    reason: Optional[str] = None,
    supplier_id: Optional[str] = None,
) -> StockMovement:
    """Add a movement and move the matching stock counter; the caller commits both together."""
    target = variant if variant is not None else product
    try:
        change = compute_movement(target.stock_quantity, movement_type, quantity, allow_negative)
    except StockError as e:
        raise HTTPException(status_code=400, detail=str(e))

    target.stock_quantity = change.stock_after
    movement = StockMovement(
        id=generate_id("mov"),
        product_id=product.id,
        variant_id=variant.id if variant is not None else None,
        type=movement_type,
        quantity=change.quantity,
        stock_before=change.stock_before,
        stock_after=change.stock_after,
        unit_cost=unit_cost,
        reference=reference,
        reason=reason,
        supplier_id=supplier_id,
    )
    db.add(movement)
    return movement


@router.get("/", response_model=stock_schemas.StockMovementPage)
def list_movements(
    product_id: Optional[str] = Query(None),
    variant_id: Optional[str] = Query(None),
    type: Optional[stock_schemas.StockMovementType] = Query(None),
    q: Optional[str] = Query(None, description="Search by product name or SKU"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_inventory_db),
):
    query = db.query(StockMovement)

    if product_id:
        query = query.filter(StockMovement.product_id == product_id)
    # A variant keeps its own trail; the product trail only holds product-level movements
    if variant_id:
        query = query.filter(StockMovement.variant_id == variant_id)
    elif product_id:
        query = query.filter(StockMovement.variant_id.is_(None))
    if type:
        query = query.filter(StockMovement.type == type)
    if q:
        like = f"%{q}%"
        query = query.join(Product).filter((Product.name.ilike(like)) | (Product.sku.ilike(like)))

    col = StockMovement.created_at
    query = query.order_by(col.desc() if order == "desc" else col.asc())
    return page_of(query, page, page_size)


# Record one movement. For "adjustment" the quantity is the counted level.
@router.post("/", response_model=stock_schemas.StockMovementOut, status_code=201)
def create_movement(
    payload: stock_schemas.StockMovementCreate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    product = get_or_404(db, Product, payload.product_id, "Product")
    variant = None
    if payload.variant_id:
        variant = get_or_404(db, ProductVariant, payload.variant_id, "Variant")
        if variant.product_id != product.id:
            raise HTTPException(status_code=400, detail="Variant does not belong to this product")

    with transaction(db):
        movement = apply_movement(
            db, product, payload.type, payload.quantity,
            variant=variant,
            allow_negative=_allow_negative(request),
            unit_cost=payload.unit_cost,
            reference=payload.reference,
            reason=payload.reason,
            supplier_id=payload.supplier_id,
        )
    db.refresh(movement)

    logger.debug("Movement %s on %s: %s -> %s", movement.type, product.id, movement.stock_before, movement.stock_after)
    write_log(
        db, action="STOCK_MOVEMENT", resource="stock", ip=client_ip(request),
        meta={"id": movement.id, "product_id": product.id, "type": movement.type, "quantity": movement.quantity},
    )
    return movement


# Bulk delivery: every line becomes an "in" movement, all committed at once
@router.post("/delivery", response_model=stock_schemas.DeliveryResult, status_code=201)
def receive_delivery(
    payload: stock_schemas.DeliveryCreate,
    request: Request,
    db: Session = Depends(get_inventory_db),
):
    if not payload.items:
        raise HTTPException(status_code=400, detail="Delivery has no items")

    movements = []
    with transaction(db):
        for item in payload.items:
            product = get_or_404(db, Product, item.product_id, "Product")
            movements.append(
                apply_movement(
                    db, product, "in", item.quantity,
                    unit_cost=item.unit_cost,
                    reference=payload.reference,
                    reason=payload.reason,
                    supplier_id=payload.supplier_id,
                )
            )
    for m in movements:
        db.refresh(m)

    write_log(
        db, action="STOCK_DELIVERY", resource="stock", ip=client_ip(request),
        meta={"count": len(movements), "reference": payload.reference},
    )
    return {"message": f"Received {len(movements)} items", "movements": movements}
