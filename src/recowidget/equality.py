# src/recowidget/equality.py
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)


def is_product_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Sequence)


def should_update(old: Optional[Sequence], new: Any) -> bool:
    """
    Shallow, order-sensitive comparison of context products.

    Elements are compared by identity, not equality: two equal but distinct
    product objects count as a change. Input that is not a sequence is
    ignored (False), so the previous snapshot stays in place.
    """
    if not is_product_sequence(new):
        return False
    if old is None or len(old) != len(new):
        return True
    return any(a is not b for a, b in zip(old, new))


class ContextSnapshot:
    """Last context-products list handed to the fetch dispatcher."""

    def __init__(self, products: Any = None):
        self._products: Optional[Tuple[Any, ...]] = None
        if is_product_sequence(products):
            self._products = tuple(products)

    @property
    def products(self) -> Optional[Tuple[Any, ...]]:
        return self._products

    def candidate(self, products: Any) -> Optional[Tuple[Any, ...]]:
        """Return what the snapshot would become for `products`, or None if unchanged."""
        if not should_update(self._products, products):
            if not is_product_sequence(products):
                logger.debug("ignoring non-sequence context products: %r", type(products))
            return None
        return tuple(products)

    def replace(self, products: Tuple[Any, ...]) -> None:
        self._products = products
        logger.debug("context products changed (%d items)", len(products))

    def offer(self, products: Any) -> bool:
        """Replace the snapshot if `products` differs; return whether it did."""
        new = self.candidate(products)
        if new is None:
            return False
        self.replace(new)
        return True
