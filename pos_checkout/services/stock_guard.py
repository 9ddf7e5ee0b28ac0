"""
Stock Guard

Advisory check of requested quantities against the last known stock
snapshot. The order service repeats the check authoritatively at order
creation, since a snapshot can be stale.
"""

import logging

from ..core.errors import StockExceeded

logger = logging.getLogger(__name__)


def check_stock(product_id: str, requested: int, available: int) -> None:
    """
    Validate a cumulative requested quantity for one product.

    Raises:
        StockExceeded: if ``requested`` is above ``available``
    """
    if requested > available:
        logger.warning(
            f"Stock check failed for {product_id}: requested={requested}, available={available}"
        )
        raise StockExceeded(product_id=product_id, requested=requested, available=available)
