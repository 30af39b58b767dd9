"""
Catalog gateway: product search and discount tiers from the catalog database.

One instance is created by the application factory and lives for the whole
process (``app.extensions['catalog_gateway']``). Read failures never reach
the caller: they are logged and degrade to "no results".
"""

import logging
import re
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pricing_app.exceptions import CatalogUnavailableError
from pricing_app.models import DiscountRow, PricingRow
from pricing_app.models.quote_item import Discount, Product

logger = logging.getLogger(__name__)

PART_NUMBER_PATTERN = re.compile(r'^[A-Za-z0-9-]+$')

DEFAULT_LISTING_LIMIT = 20
SEARCH_LIMIT = 50


def _escape_like(term: str) -> str:
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def looks_like_part_number(term: str) -> bool:
    return bool(PART_NUMBER_PATTERN.match(term))


def product_from_row(row: PricingRow) -> Product:
    return Product(
        id=str(row.id),
        part_number=row.item,
        description=row.description or '',
        list_price=Decimal(str(row.list_price)),
    )


def discount_from_row(row: DiscountRow) -> Optional[Discount]:
    """
    Map a tier row to a Discount; the table stores the price multiplier,
    the domain uses the discount rate.
    """
    factor = Decimal(str(row.multiplier))
    if factor <= 0 or factor > 1:
        logger.warning(f"[CATALOG] Skipping discount {row.id}: multiplier {factor} out of range")
        return None
    return Discount(id=str(row.id), name=f"{row.discount}%", value=Decimal('1') - factor)


class CatalogGateway:
    """
    Read access to the ``pricing`` and ``discounts`` tables.

    ``session_factory`` is a callable returning a SQLAlchemy session, usually
    the application's ``scoped_session`` (removed by the app teardown).
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        default_limit: int = DEFAULT_LISTING_LIMIT,
        search_limit: int = SEARCH_LIMIT,
    ):
        self._session_factory = session_factory
        self.default_limit = default_limit
        self.search_limit = search_limit
        self._discounts: Optional[List[Discount]] = None

    def fetch_products(self, search_term: str = '') -> List[Product]:
        """
        Search products by part number or description.

        An empty term returns the first ``default_limit`` products; identifier
        looking terms match part numbers exactly or by prefix, free text
        matches a substring of the part number or description. Results are
        ordered by part number.
        """
        term = (search_term or '').strip().lower()

        try:
            session = self._session_factory()
            query = session.query(PricingRow)

            if term:
                escaped = _escape_like(term)
                if looks_like_part_number(term):
                    query = query.filter(or_(
                        func.lower(PricingRow.item) == term,
                        PricingRow.item.ilike(f'{escaped}%', escape='\\'),
                    ))
                else:
                    query = query.filter(or_(
                        PricingRow.item.ilike(f'%{escaped}%', escape='\\'),
                        PricingRow.description.ilike(f'%{escaped}%', escape='\\'),
                    ))
                limit = self.search_limit
            else:
                limit = self.default_limit

            rows = query.order_by(PricingRow.item.asc()).limit(limit).all()
        except SQLAlchemyError:
            logger.exception(f"[CATALOG] Product search failed for {term!r}")
            self._reset()
            return []

        logger.debug(f"[CATALOG] {len(rows)} products for {term or 'default listing'!r}")
        return [product_from_row(row) for row in rows]

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            session = self._session_factory()
            row = session.query(PricingRow).filter(PricingRow.id == str(product_id)).first()
        except SQLAlchemyError:
            logger.exception(f"[CATALOG] Product lookup failed for {product_id}")
            self._reset()
            return None
        return product_from_row(row) if row else None

    def fetch_discounts(self, refresh: bool = False) -> List[Discount]:
        """
        All discount tiers, loaded once and reused until ``refresh``.

        A failed load is not cached so the next call retries.
        """
        if self._discounts is not None and not refresh:
            return list(self._discounts)

        try:
            session = self._session_factory()
            rows = session.query(DiscountRow).order_by(DiscountRow.multiplier.desc(), DiscountRow.id).all()
        except SQLAlchemyError:
            logger.exception("[CATALOG] Loading discounts failed")
            self._reset()
            return []

        discounts = [d for d in (discount_from_row(row) for row in rows) if d is not None]
        self._discounts = discounts
        logger.info(f"[CATALOG] Loaded {len(discounts)} discount tiers")
        return list(discounts)

    def get_discount(self, discount_id: str) -> Optional[Discount]:
        for discount in self.fetch_discounts():
            if discount.id == str(discount_id):
                return discount
        return None

    def ping(self) -> bool:
        """Connectivity check against the pricing table."""
        try:
            self.count_products()
        except CatalogUnavailableError:
            return False
        return True

    def count_products(self) -> int:
        try:
            session = self._session_factory()
            return session.query(func.count(PricingRow.id)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"[CATALOG] Connection test failed: {e}")
            self._reset()
            raise CatalogUnavailableError(f'Catalog unavailable: {e.__class__.__name__}')

    def count_discounts(self) -> int:
        try:
            session = self._session_factory()
            return session.query(func.count(DiscountRow.id)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"[CATALOG] Connection test failed: {e}")
            self._reset()
            raise CatalogUnavailableError(f'Catalog unavailable: {e.__class__.__name__}')

    def _reset(self) -> None:
        """Roll back after a failed read so the session stays usable."""
        try:
            self._session_factory().rollback()
        except SQLAlchemyError as e:
            logger.warning(f"[CATALOG] Rollback after failure also failed: {e}")
