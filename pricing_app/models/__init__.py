"""Models package - catalog tables and quote value objects."""
from pricing_app.models.catalog import PricingRow, DiscountRow
from pricing_app.models.quote_item import Product, Discount, QuoteLineItem

__all__ = [
    # Catalog tables
    'PricingRow', 'DiscountRow',
    # Value objects
    'Product', 'Discount', 'QuoteLineItem',
]
