"""Catalog blueprint: product search and discount tiers."""
from flask import Blueprint, current_app, jsonify, request, session

from pricing_app.exceptions import CatalogUnavailableError
from pricing_app.services.product_search import ProductSearch

catalog_bp = Blueprint('catalog', __name__, url_prefix='/catalog')

RECENT_SEARCHES_KEY = 'recent_searches'


def get_gateway():
    """The process-wide catalog gateway created by the app factory."""
    return current_app.extensions['catalog_gateway']


def get_product_search():
    """Search controller for this request, carrying the browser's recent searches."""
    search = ProductSearch(
        get_gateway(),
        debounce=current_app.config.get('SEARCH_DEBOUNCE_SECONDS', 0.5),
        min_length=current_app.config.get('CATALOG_MIN_QUERY_LENGTH', 3),
    )
    search.recent_searches = list(session.get(RECENT_SEARCHES_KEY, []))
    return search


@catalog_bp.route('/products')
def search_products():
    """
    Search products.

    No ``q`` returns the default listing; a term shorter than the minimum
    length is no query at all and returns nothing. The debounce and minimum
    length are echoed so the search box can throttle its requests.
    """
    term = request.args.get('q', '').strip()
    search = get_product_search()
    products = search.search_now(term)
    session[RECENT_SEARCHES_KEY] = search.recent_searches

    return jsonify({
        'query': term,
        'products': [p.to_dict() for p in products],
        'count': len(products),
        'no_results': search.show_no_results,
        'recent_searches': search.recent_searches,
        'min_length': search.min_length,
        'debounce_seconds': search.debounce,
    })


@catalog_bp.route('/discounts')
def list_discounts():
    refresh = request.args.get('refresh', '').lower() in ('1', 'true', 'yes')
    discounts = get_gateway().fetch_discounts(refresh=refresh)
    return jsonify({'discounts': [d.to_dict() for d in discounts]})


@catalog_bp.route('/health')
def health():
    """Catalog connectivity check."""
    gateway = get_gateway()
    try:
        products = gateway.count_products()
        discounts = gateway.count_discounts()
    except CatalogUnavailableError as e:
        current_app.logger.warning(f"[CATALOG] Health check failed: {e.message}")
        return jsonify({'status': 'error', 'message': e.message}), e.status_code

    return jsonify({'status': 'ok', 'products': products, 'discounts': discounts})
