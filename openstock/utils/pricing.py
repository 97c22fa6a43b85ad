# openstock/utils/pricing.py
from typing import Optional, Tuple

DEFAULT_MARGIN_PERCENT = 30.0


def derive_prices(
    cost_price: float,
    selling_price: Optional[float] = None,
    margin_percent: Optional[float] = None,
    default_margin: float = DEFAULT_MARGIN_PERCENT,
) -> Tuple[float, float]:
    """Return (selling_price, margin_percent) from whichever of the two was given.

    An explicit selling price wins and the margin is recomputed from cost;
    otherwise the selling price is cost plus the (given or default) margin.
    """
    cost = cost_price or 0.0
    if selling_price is not None:
        if cost > 0:
            margin = (selling_price - cost) / cost * 100
        else:
            margin = margin_percent if margin_percent is not None else default_margin
        return round(selling_price, 2), round(margin, 2)

    margin = margin_percent if margin_percent is not None else default_margin
    return round(cost * (1 + margin / 100), 2), round(margin, 2)
