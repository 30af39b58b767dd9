"""Quote blueprint: build the quote in the session and export it as text."""
from flask import Blueprint, current_app, jsonify, request, session, Response
from flask_wtf.csrf import generate_csrf

from pricing_app.exceptions import NotFoundError, ValidationError
from pricing_app.services import pricing_service
from pricing_app.services.quote_renderer import QuoteFormat, RenderOptions, render_quote
from pricing_app.services.quote_service import QuoteSession
from pricing_app.utils.formatters import round_money

quotes_bp = Blueprint('quotes', __name__, url_prefix='/quote')


def _gateway():
    return current_app.extensions['catalog_gateway']


def _session_key():
    return current_app.config.get('QUOTE_SESSION_KEY', 'quote')


def load_quote():
    """
    Get the quote from the session.

    A brand-new quote starts on the first discount tier; an existing one is
    re-aligned with the current tier list.
    """
    key = _session_key()
    discounts = _gateway().fetch_discounts()

    if key not in session:
        quote = new_quote(discounts)
        save_quote(quote)
        return quote

    quote = QuoteSession.from_dict(session[key])
    quote.reconcile_discounts(discounts)
    return quote


def new_quote(discounts):
    quote = QuoteSession()
    if discounts:
        quote.select_discount(discounts[0])
    return quote


def save_quote(quote):
    session[_session_key()] = quote.to_dict()
    session.modified = True


def quote_payload(quote):
    """JSON view of the quote; money rounded to cents."""
    margin = quote.margin
    items = []
    for line in quote.lines:
        items.append({
            'id': line.id,
            'part_number': line.part_number,
            'description': line.description,
            'quantity': line.quantity,
            'list_price': str(round_money(line.list_price)),
            'discounted_price': str(round_money(line.discounted_price)),
            'line_total': str(round_money(line.line_total)),
            'customer_price': str(round_money(
                pricing_service.customer_price(line.discounted_price, margin))),
            'customer_line_total': str(round_money(
                pricing_service.customer_line_total(line.discounted_price, margin, line.quantity))),
        })

    discount = quote.selected_discount
    return {
        'items': items,
        'discount': discount.to_dict() if discount else None,
        'discount_name': quote.discount_name,
        'margin': str(margin),
        'item_count': quote.item_count,
        'subtotal': str(round_money(quote.subtotal)),
        'customer_subtotal': str(round_money(quote.customer_subtotal)),
        'distribution_profit': str(round_money(quote.distribution_profit)),
    }


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object body.')
    return data


def _parse_quantity(value):
    """Whole numbers only; numeric strings like "3" are accepted."""
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    return pricing_service.validate_quantity(value)


def _flag(data, key):
    value = data.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


@quotes_bp.route('', methods=['GET'])
def view_quote():
    quote = load_quote()
    save_quote(quote)
    payload = quote_payload(quote)
    payload['csrf_token'] = generate_csrf()
    return jsonify(payload)


@quotes_bp.route('/items', methods=['POST'])
def add_item():
    data = _json_body()
    product_id = data.get('product_id')
    if product_id in (None, ''):
        raise ValidationError('product_id is required.')

    product = _gateway().get_product(str(product_id))
    if not product:
        raise NotFoundError(f'Product {product_id} not found.', payload={'product_id': product_id})

    quote = load_quote()
    quote.add_product(product)
    save_quote(quote)
    current_app.logger.info(f"[QUOTE] Added {product.part_number}")
    return jsonify(quote_payload(quote)), 201


@quotes_bp.route('/items/<product_id>', methods=['PATCH'])
def change_quantity(product_id):
    data = _json_body()
    quantity = _parse_quantity(data.get('quantity'))

    quote = load_quote()
    quote.change_quantity(product_id, quantity)
    save_quote(quote)
    return jsonify(quote_payload(quote))


@quotes_bp.route('/items/<product_id>', methods=['DELETE'])
def remove_item(product_id):
    quote = load_quote()
    quote.remove_line(product_id)
    save_quote(quote)
    return jsonify(quote_payload(quote))


@quotes_bp.route('/discount', methods=['PUT'])
def select_discount():
    data = _json_body()
    discount_id = data.get('discount_id')

    discount = None
    if discount_id not in (None, ''):
        discount = _gateway().get_discount(str(discount_id))
        if not discount:
            raise NotFoundError(f'Discount {discount_id} not found.', payload={'discount_id': discount_id})

    quote = load_quote()
    quote.select_discount(discount)
    save_quote(quote)
    return jsonify(quote_payload(quote))


@quotes_bp.route('/margin', methods=['PUT'])
def set_margin():
    data = _json_body()
    if 'margin' not in data:
        raise ValidationError('margin is required.')

    quote = load_quote()
    quote.set_margin(data['margin'])
    save_quote(quote)
    return jsonify(quote_payload(quote))


@quotes_bp.route('', methods=['DELETE'])
def clear_quote():
    quote = new_quote(_gateway().fetch_discounts())
    save_quote(quote)
    return jsonify(quote_payload(quote))


@quotes_bp.route('/export', methods=['POST'])
def export_quote():
    """Render the quote text that goes to the clipboard."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object body.')

    notes = data.get('additional_notes')
    if notes is not None and not isinstance(notes, str):
        raise ValidationError('additional_notes must be text.')

    quote = load_quote()
    if quote.is_empty:
        raise ValidationError('The quote is empty. Add products before exporting.')

    options = RenderOptions(
        show_list_price=_flag(data, 'show_list_price'),
        show_customer_price=_flag(data, 'show_customer_price'),
        format=QuoteFormat.parse(data.get('format') or current_app.config.get('QUOTE_DEFAULT_FORMAT')),
        additional_notes=notes or None,
        margin=quote.margin,
    )
    text = render_quote(quote.lines, quote.discount_name, options)
    return Response(text, mimetype='text/plain')
