"""
Value objects handed between the catalog gateway, the quote model and the
renderer.

All of them are frozen: a product or discount never changes once fetched and
the quote model replaces line items instead of mutating them, so a snapshot
taken by a reader stays consistent.
"""
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict


@dataclass(frozen=True)
class Product:
    id: str
    part_number: str
    description: str
    list_price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'part_number': self.part_number,
            'description': self.description,
            'list_price': str(self.list_price),
        }


@dataclass(frozen=True)
class Discount:
    """Discount tier. ``value`` is the fractional rate, 0 means no discount."""
    id: str
    name: str
    value: Decimal

    @property
    def multiplier(self) -> Decimal:
        return Decimal('1') - self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'value': str(self.value),
            'multiplier': str(self.multiplier),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Discount':
        return cls(id=str(data['id']), name=data['name'], value=Decimal(str(data['value'])))


@dataclass(frozen=True)
class QuoteLineItem:
    """A product on the quote with its distributor-facing derived prices."""
    id: str
    part_number: str
    description: str
    list_price: Decimal
    quantity: int
    discounted_price: Decimal
    line_total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ('list_price', 'discounted_price', 'line_total'):
            data[key] = str(data[key])
        return data
