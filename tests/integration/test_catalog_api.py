"""
Integration tests for the catalog endpoints.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from pricing_app.services.catalog_gateway import CatalogGateway


class TestProductSearchEndpoint:

    def test_default_listing(self, client):
        data = client.get('/catalog/products').get_json()
        assert data['count'] == 5
        assert data['products'][0]['part_number'] == 'ABC-100'

    def test_search_by_part_number(self, client):
        data = client.get('/catalog/products?q=abc-2').get_json()
        assert [p['part_number'] for p in data['products']] == ['ABC-200']
        assert data['products'][0]['list_price'] == '50.00'

    def test_search_by_description(self, client):
        data = client.get('/catalog/products?q=stainless washer').get_json()
        assert [p['id'] for p in data['products']] == ['p-300']

    def test_short_term_returns_nothing(self, client):
        client.get('/catalog/products?q=abc')
        data = client.get('/catalog/products?q=ab').get_json()
        assert data['products'] == []
        assert data['count'] == 0
        assert data['no_results'] is False

    def test_no_results_flag(self, client):
        data = client.get('/catalog/products?q=qqq-999').get_json()
        assert data['count'] == 0
        assert data['no_results'] is True
        assert data['recent_searches'] == []

    def test_recent_searches_kept_in_session(self, client):
        client.get('/catalog/products?q=abc')
        client.get('/catalog/products?q=zzz-0')
        data = client.get('/catalog/products?q=hex nut').get_json()

        assert data['recent_searches'] == ['hex nut', 'abc']

    def test_search_settings_come_from_config(self, app, client):
        app.config['SEARCH_DEBOUNCE_SECONDS'] = 0.25
        app.config['CATALOG_MIN_QUERY_LENGTH'] = 5

        data = client.get('/catalog/products?q=abc-1').get_json()
        assert data['debounce_seconds'] == 0.25
        assert data['min_length'] == 5
        assert data['count'] == 1

        assert client.get('/catalog/products?q=abc').get_json()['products'] == []

    def test_gateway_failure_shows_no_results(self, app, client):
        engine = create_engine('sqlite://')
        app.extensions['catalog_gateway'] = CatalogGateway(scoped_session(sessionmaker(bind=engine)))

        response = client.get('/catalog/products?q=abc')

        assert response.status_code == 200
        assert response.get_json()['products'] == []


class TestDiscountEndpoint:

    def test_list_discounts(self, client):
        data = client.get('/catalog/discounts').get_json()
        assert [d['name'] for d in data['discounts']] == ['0%', '5%', '10%']
        assert data['discounts'][2]['multiplier'] == '0.9000'


class TestHealth:

    def test_healthy(self, client):
        data = client.get('/catalog/health').get_json()
        assert data == {'status': 'ok', 'products': 5, 'discounts': 3}

    def test_unavailable(self, app, client):
        engine = create_engine('sqlite://')
        app.extensions['catalog_gateway'] = CatalogGateway(scoped_session(sessionmaker(bind=engine)))

        response = client.get('/catalog/health')

        assert response.status_code == 503
        assert response.get_json()['status'] == 'error'


class TestErrors:

    def test_unknown_route_is_json(self, client):
        response = client.get('/nowhere')
        assert response.status_code == 404
        assert response.get_json()['status'] == 'error'

    def test_wrong_method(self, client):
        assert client.put('/catalog/products').status_code == 405
