"""
Unit tests for the debounced product search controller.
"""

import pytest
from decimal import Decimal

from pricing_app.models import Product
from pricing_app.services.product_search import ProductSearch


class RecordingGateway:
    """Stands in for CatalogGateway; returns one product per matching term."""

    def __init__(self, empty_terms=()):
        self.calls = []
        self.empty_terms = set(empty_terms)

    def fetch_products(self, search_term=''):
        self.calls.append(search_term)
        if search_term in self.empty_terms:
            return []
        return [Product(id=search_term, part_number=search_term.upper(), description='', list_price=Decimal('1'))]


@pytest.fixture
def gateway():
    return RecordingGateway(empty_terms={'zzz'})


@pytest.fixture
def search(gateway):
    return ProductSearch(gateway, debounce=0.5, min_length=3, clock=lambda: 0.0)


class TestDebounce:

    def test_search_waits_for_quiet_period(self, search, gateway):
        search.update_term('abc', now=10.0)

        assert search.poll(now=10.2) is False
        assert gateway.calls == []
        assert search.poll(now=10.5) is True
        assert gateway.calls == ['abc']

    def test_typing_restarts_the_timer(self, search, gateway):
        search.update_term('abc', now=10.0)
        search.update_term('abcd', now=10.4)

        assert search.poll(now=10.6) is False
        assert search.poll(now=10.9) is True
        assert gateway.calls == ['abcd']

    def test_short_term_clears_earlier_results(self, search, gateway):
        search.search_now('abc')
        assert [p.part_number for p in search.results] == ['ABC']

        search.update_term('ab', now=1.0)

        assert search.poll(now=5.0) is False
        assert search.results == []
        assert search.show_no_results is False
        assert gateway.calls == ['abc']

    def test_search_now_ignores_short_term(self, search, gateway):
        search.search_now('abc')

        assert search.search_now('ab') == []
        assert gateway.calls == ['abc']

    def test_empty_search_now_lists_catalog(self, search, gateway):
        search.search_now('')
        assert gateway.calls == ['']
        assert search.recent_searches == []

    def test_poll_without_pending_term(self, search):
        assert search.pending is False
        assert search.poll(now=100.0) is False

    def test_empty_term_clears_immediately(self, search, gateway):
        search.search_now('abc')
        assert search.results

        search.update_term('', now=1.0)

        assert search.results == []
        assert search.pending is False
        assert search.show_no_results is False


class TestLastWriterWins:

    def test_older_ticket_is_dropped(self, search):
        first = search.begin_search()
        second = search.begin_search()
        newer = [Product(id='n', part_number='NEW', description='', list_price=Decimal('1'))]
        older = [Product(id='o', part_number='OLD', description='', list_price=Decimal('1'))]

        assert search.apply_results(second, newer, 'new') is True
        assert search.apply_results(first, older, 'old') is False
        assert [p.part_number for p in search.results] == ['NEW']

    def test_results_in_flight_ignored_after_clear(self, search):
        ticket = search.begin_search()
        search.clear()

        assert search.apply_results(ticket, [Product(id='x', part_number='X', description='',
                                                     list_price=Decimal('1'))]) is False
        assert search.results == []


class TestRecentSearches:

    def test_no_results_flag(self, search):
        search.search_now('zzz')
        assert search.show_no_results is True
        assert search.recent_searches == []

    def test_recent_searches_newest_first_and_bounded(self, search):
        for term in ['aaa', 'bbb', 'ccc', 'aaa', 'ddd', 'eee', 'fff']:
            search.search_now(term)

        assert search.recent_searches == ['fff', 'eee', 'ddd', 'ccc', 'bbb']
