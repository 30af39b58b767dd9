"""
Quote service: the in-progress quote and its state transitions.

Every mutating transition validates its input first, leaves the state
untouched when validation fails and recomputes the derived prices before
returning, so any read after a transition sees prices consistent with the
selected discount.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pricing_app.exceptions import NotFoundError, ValidationError
from pricing_app.models.quote_item import Discount, Product, QuoteLineItem
from pricing_app.services import pricing_service
from pricing_app.services.pricing_service import ZERO

logger = logging.getLogger(__name__)


class QuoteSession:
    """Ordered line items, the selected discount tier and the profit margin."""

    def __init__(self):
        self._lines: List[QuoteLineItem] = []
        self._discount: Optional[Discount] = None
        self._margin: Decimal = ZERO

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def lines(self) -> Tuple[QuoteLineItem, ...]:
        return tuple(self._lines)

    @property
    def selected_discount(self) -> Optional[Discount]:
        return self._discount

    @property
    def discount_rate(self) -> Decimal:
        """Effective rate; no selected discount means 0%."""
        return self._discount.value if self._discount else ZERO

    @property
    def discount_name(self) -> str:
        return self._discount.name if self._discount else 'None'

    @property
    def margin(self) -> Decimal:
        return self._margin

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def subtotal(self) -> Decimal:
        return pricing_service.subtotal(line.line_total for line in self._lines)

    @property
    def customer_subtotal(self) -> Decimal:
        return pricing_service.subtotal(
            pricing_service.customer_line_total(line.discounted_price, self._margin, line.quantity)
            for line in self._lines
        )

    @property
    def distribution_profit(self) -> Decimal:
        return self.customer_subtotal - self.subtotal

    def get_line(self, product_id: str) -> Optional[QuoteLineItem]:
        for line in self._lines:
            if line.id == product_id:
                return line
        return None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_product(self, product: Product) -> QuoteLineItem:
        """Add a product, or bump the quantity when it is already quoted."""
        existing = self.get_line(product.id)
        if existing:
            return self.change_quantity(product.id, existing.quantity + 1)

        list_price = pricing_service.validate_price(product.list_price)
        discounted = pricing_service.apply_discount(list_price, self.discount_rate)
        line = QuoteLineItem(
            id=product.id,
            part_number=product.part_number,
            description=product.description,
            list_price=list_price,
            quantity=1,
            discounted_price=discounted,
            line_total=pricing_service.line_total(discounted, 1),
        )
        self._lines.append(line)
        logger.debug(f"[QUOTE] Added {product.part_number} at {discounted}")
        return line

    def change_quantity(self, product_id: str, quantity: int) -> QuoteLineItem:
        """Set a line's quantity; only its line total is recomputed."""
        quantity = pricing_service.validate_quantity(quantity)
        for index, line in enumerate(self._lines):
            if line.id == product_id:
                updated = QuoteLineItem(
                    id=line.id,
                    part_number=line.part_number,
                    description=line.description,
                    list_price=line.list_price,
                    quantity=quantity,
                    discounted_price=line.discounted_price,
                    line_total=pricing_service.line_total(line.discounted_price, quantity),
                )
                self._lines[index] = updated
                return updated
        raise NotFoundError(f'Product {product_id} is not on the quote.', payload={'product_id': product_id})

    def remove_line(self, product_id: str) -> bool:
        """Remove a line. Unknown ids are a no-op; returns whether a line was removed."""
        remaining = [line for line in self._lines if line.id != product_id]
        removed = len(remaining) != len(self._lines)
        self._lines = remaining
        return removed

    def select_discount(self, discount: Optional[Discount]) -> None:
        """Select a tier (or none) and reprice every existing line."""
        if discount is not None:
            pricing_service.validate_rate(discount.value)
        self._discount = discount
        self._recompute()
        logger.debug(f"[QUOTE] Discount set to {self.discount_name}, {len(self._lines)} lines repriced")

    def set_margin(self, margin) -> Decimal:
        """Store the margin used for customer prices; distributor prices are untouched."""
        self._margin = pricing_service.validate_margin(margin)
        return self._margin

    def reconcile_discounts(self, discounts: Iterable[Discount]) -> Optional[Discount]:
        """
        Re-align the selection with a freshly fetched discount list.

        If the selected tier disappeared, the first available tier is
        selected (None when the list is empty). A tier that is still present
        is re-selected from the fresh list so a changed value is picked up.
        An explicit "no discount" selection is left alone.
        """
        current = self._discount
        if current is None:
            return None

        available = list(discounts)
        for discount in available:
            if discount.id == current.id:
                if discount != current:
                    self.select_discount(discount)
                return self._discount

        logger.info(f"[QUOTE] Discount {current.id} no longer available, falling back")
        self.select_discount(available[0] if available else None)
        return self._discount

    def clear(self) -> None:
        self._lines = []
        self._discount = None
        self._margin = ZERO

    def _recompute(self) -> None:
        """Full repricing pass; the new line list replaces the old one at once."""
        rate = self.discount_rate
        repriced = []
        for line in self._lines:
            discounted = pricing_service.apply_discount(line.list_price, rate)
            repriced.append(QuoteLineItem(
                id=line.id,
                part_number=line.part_number,
                description=line.description,
                list_price=line.list_price,
                quantity=line.quantity,
                discounted_price=discounted,
                line_total=pricing_service.line_total(discounted, line.quantity),
            ))
        self._lines = repriced

    # ------------------------------------------------------------------
    # Serialization (Flask session storage)
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [line.to_dict() for line in self._lines],
            'discount': self._discount.to_dict() if self._discount else None,
            'margin': str(self._margin),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'QuoteSession':
        """
        Rebuild a session from :meth:`to_dict` output.

        Derived prices are recomputed rather than trusted.
        """
        quote = cls()
        if not data:
            return quote

        try:
            if data.get('discount'):
                quote._discount = Discount.from_dict(data['discount'])
                pricing_service.validate_rate(quote._discount.value)
            quote._margin = pricing_service.validate_margin(data.get('margin', '0'))
            for item in data.get('items', []):
                quantity = pricing_service.validate_quantity(int(item.get('quantity', 1)))
                quote._lines.append(QuoteLineItem(
                    id=str(item['id']),
                    part_number=item['part_number'],
                    description=item.get('description', ''),
                    list_price=pricing_service.validate_price(item['list_price']),
                    quantity=quantity,
                    discounted_price=ZERO,
                    line_total=ZERO,
                ))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"[QUOTE] Discarding unreadable stored quote: {e}")
            return cls()

        quote._recompute()
        return quote
