# openstock/utils/stock.py
from dataclasses import dataclass

MOVEMENT_TYPES = ("in", "out", "adjustment")


class StockError(ValueError):
    pass


@dataclass(frozen=True)
class StockChange:
    stock_before: int
    stock_after: int
    # Signed delta that was actually applied: stock_after - stock_before
    quantity: int


def signed_delta(movement_type: str, quantity: int, stock_before: int = 0) -> int:
    """Delta a movement applies to the running total.

    For ``adjustment`` the quantity is the new absolute level, so the delta
    depends on the level it replaces.
    """
    if movement_type == "in":
        return quantity
    if movement_type == "out":
        return -quantity
    if movement_type == "adjustment":
        return quantity - stock_before
    raise StockError(f"Unknown movement type: {movement_type}")


def compute_movement(current: int, movement_type: str, quantity: int, allow_negative: bool = False) -> StockChange:
    if movement_type in ("in", "out") and quantity < 0:
        raise StockError("Quantity must not be negative")

    stock_before = current or 0
    delta = signed_delta(movement_type, quantity, stock_before)
    stock_after = stock_before + delta

    if stock_after < 0 and not allow_negative:
        raise StockError(
            f"Insufficient stock: {stock_before} available, movement would leave {stock_after}"
        )
    return StockChange(stock_before=stock_before, stock_after=stock_after, quantity=delta)


def is_low_stock(stock_quantity: int, stock_min: int, is_active: bool = True) -> bool:
    return bool(is_active) and (stock_quantity or 0) <= (stock_min or 0)


def low_stock_gap(stock_quantity: int, stock_min: int) -> int:
    # Lower is more urgent; the low-stock ranking sorts on this ascending
    return (stock_quantity or 0) - (stock_min or 0)
