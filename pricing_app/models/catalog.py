"""Catalog models: priced products and discount tiers."""
from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.sql import func
from pricing_app.database import Base


class PricingRow(Base):
    """
    Catalog product row (table ``pricing``).

    ``item`` holds the part number; the gateway maps rows to
    :class:`pricing_app.models.quote_item.Product` value objects.
    """
    
    __tablename__ = 'pricing'
    
    id = Column(String(64), primary_key=True)
    item = Column(String(64), nullable=False, unique=True, index=True)
    description = Column(String(255), nullable=False, default='', server_default='')
    list_price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<PricingRow(id={self.id}, item='{self.item}', list_price={self.list_price})>"


class DiscountRow(Base):
    """
    Discount tier row (table ``discounts``).

    ``discount`` is the tier label (e.g. "25") and ``multiplier`` the factor
    applied to list prices (0.75 for a 25% tier).
    """
    
    __tablename__ = 'discounts'
    
    id = Column(String(64), primary_key=True)
    discount = Column(String(64), nullable=False)
    multiplier = Column(Numeric(6, 4), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<DiscountRow(id={self.id}, discount='{self.discount}', multiplier={self.multiplier})>"
