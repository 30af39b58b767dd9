"""
Search-box controller in front of the catalog gateway.

Keystrokes are debounced: ``update_term`` only records the term and a
deadline, ``poll`` runs the search once the user stopped typing. Results
carry a ticket and an older ticket never overwrites a newer one, so a slow
response cannot replace the list of a later search.
"""

import logging
import time
from typing import Callable, List, Optional

from pricing_app.models.quote_item import Product
from pricing_app.services.catalog_gateway import CatalogGateway

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.5
MIN_QUERY_LENGTH = 3
RECENT_SEARCHES = 5


class ProductSearch:

    def __init__(
        self,
        gateway: CatalogGateway,
        debounce: float = DEBOUNCE_SECONDS,
        min_length: int = MIN_QUERY_LENGTH,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.debounce = debounce
        self.min_length = min_length
        self._clock = clock

        self.term = ''
        self.results: List[Product] = []
        self.recent_searches: List[str] = []
        self.show_no_results = False

        self._deadline: Optional[float] = None
        self._next_ticket = 0
        self._applied_ticket = 0

    def update_term(self, term: str, now: Optional[float] = None) -> None:
        """Record a new search term; an empty term clears the results at once."""
        self.term = term or ''
        if not self.term.strip():
            self.clear()
            return
        self._deadline = (self._clock() if now is None else now) + self.debounce

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def poll(self, now: Optional[float] = None) -> bool:
        """Run the pending search if the debounce delay elapsed. Returns True if it ran."""
        if self._deadline is None:
            return False
        if (self._clock() if now is None else now) < self._deadline:
            return False
        self._deadline = None
        if self.is_too_short(self.term):
            # Too short to be a query: nothing from an earlier search stays listed
            self._drop_results()
            return False
        self.search_now(self.term)
        return True

    def is_too_short(self, term: str) -> bool:
        term = (term or '').strip()
        return bool(term) and len(term) < self.min_length

    def search_now(self, term: str) -> List[Product]:
        """Search immediately. An empty term lists the catalog, a short one lists nothing."""
        self.term = term or ''
        self._deadline = None
        if self.is_too_short(self.term):
            self._drop_results()
            return self.results
        ticket = self.begin_search()
        products = self.gateway.fetch_products(self.term)
        self.apply_results(ticket, products, self.term)
        return self.results

    def begin_search(self) -> int:
        self._next_ticket += 1
        return self._next_ticket

    def apply_results(self, ticket: int, products: List[Product], term: Optional[str] = None) -> bool:
        """Show ``products`` unless a newer search already filled the list."""
        if ticket < self._applied_ticket:
            logger.debug(f"[CATALOG] Dropping stale results for ticket {ticket}")
            return False
        self._applied_ticket = ticket
        self.results = list(products)
        self.show_no_results = not self.results

        term = (term if term is not None else self.term).strip()
        if self.results and term:
            self._remember(term)
        return True

    def clear(self) -> None:
        self.term = ''
        self._deadline = None
        self._drop_results()

    def _drop_results(self) -> None:
        self.results = []
        self.show_no_results = False
        # Responses still in flight must not refill the cleared list
        self._applied_ticket = self._next_ticket + 1
        self._next_ticket = self._applied_ticket

    def _remember(self, term: str) -> None:
        if term in self.recent_searches:
            return
        self.recent_searches = [term] + self.recent_searches[:RECENT_SEARCHES - 1]
