"""
Quote renderer: line items -> plain-text document for email.

Three layouts share the same table data: a bulleted list, tab-delimited
rows (pastes into spreadsheets) and a Markdown pipe table. The output only
depends on the arguments; the date stamp defaults to today and can be pinned
with ``issued_on``.
"""

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from pricing_app.exceptions import ValidationError
from pricing_app.models.quote_item import QuoteLineItem
from pricing_app.services import pricing_service
from pricing_app.utils.formatters import money, multiplier, quote_date


class QuoteFormat(enum.Enum):
    """Closed set of export layouts."""
    BULLET_LIST = 'bullet_list'
    TAB_DELIMITED = 'tab_delimited'
    MARKDOWN_TABLE = 'markdown_table'

    @classmethod
    def parse(cls, value) -> 'QuoteFormat':
        """Accept an enum member, its value or the camelCase name used by web clients."""
        if isinstance(value, cls):
            return value
        aliases = {
            'bulletlist': cls.BULLET_LIST,
            'tabdelimited': cls.TAB_DELIMITED,
            'markdowntable': cls.MARKDOWN_TABLE,
        }
        key = str(value or '').strip().lower().replace('_', '').replace('-', '')
        if key not in aliases:
            raise ValidationError(f'Unknown quote format: {value!r}.')
        return aliases[key]


@dataclass(frozen=True)
class RenderOptions:
    show_list_price: bool = False
    show_customer_price: bool = False
    format: QuoteFormat = QuoteFormat.MARKDOWN_TABLE
    additional_notes: Optional[str] = None
    # Required when show_customer_price is set
    margin: Optional[Decimal] = None


def discount_multiplier(lines: Sequence[QuoteLineItem]) -> Decimal:
    """
    Multiplier actually realized on the first line item.

    Falls back to 1 (no discount) for an empty quote or a free first item.
    """
    if not lines or lines[0].list_price == 0:
        return Decimal('1')
    first = lines[0]
    return first.discounted_price / first.list_price


def _columns(options: RenderOptions) -> List[str]:
    columns = ['Part Number', 'Description', 'Qty']
    if options.show_list_price:
        columns.append('List Price')
    if options.show_customer_price:
        columns += ['Distributor Price', 'Customer Price', 'Line Total', 'Customer Total']
    else:
        columns += ['Unit Price', 'Line Total']
    return columns


def _row(line: QuoteLineItem, options: RenderOptions, margin: Decimal) -> List[str]:
    row = [line.part_number, line.description, str(line.quantity)]
    if options.show_list_price:
        row.append(money(line.list_price))
    if options.show_customer_price:
        unit = pricing_service.customer_price(line.discounted_price, margin)
        row += [
            money(line.discounted_price),
            money(unit),
            money(line.line_total),
            money(pricing_service.customer_line_total(line.discounted_price, margin, line.quantity)),
        ]
    else:
        row += [money(line.discounted_price), money(line.line_total)]
    return row


def _render_bullets(lines: Sequence[QuoteLineItem], options: RenderOptions, margin: Decimal) -> List[str]:
    out: List[str] = []
    for index, line in enumerate(lines):
        if index:
            out.append('')
        out.append(f"• {line.part_number} - {line.description}")
        out.append(f"  Quantity: {line.quantity}")
        if options.show_list_price:
            out.append(f"  List Price: {money(line.list_price)}")
        out.append(f"  Distributor Price: {money(line.discounted_price)}")
        if options.show_customer_price:
            out.append(f"  Customer Price: {money(pricing_service.customer_price(line.discounted_price, margin))}")
        out.append(f"  Line Total: {money(line.line_total)}")
        if options.show_customer_price:
            total = pricing_service.customer_line_total(line.discounted_price, margin, line.quantity)
            out.append(f"  Customer Total: {money(total)}")
    return out


def _tab_cell(value: str) -> str:
    return ' '.join(value.replace('\t', ' ').splitlines())


def _render_tabs(table: List[List[str]]) -> List[str]:
    return ['\t'.join(_tab_cell(cell) for cell in row) for row in table]


def _markdown_cell(value: str) -> str:
    return ' '.join(value.replace('|', '\\|').splitlines())


def _render_markdown(table: List[List[str]]) -> List[str]:
    header, rows = table[0], table[1:]
    out = ['| ' + ' | '.join(_markdown_cell(cell) for cell in header) + ' |']
    out.append('|' + '|'.join('-' * (len(cell) + 2) for cell in header) + '|')
    for row in rows:
        out.append('| ' + ' | '.join(_markdown_cell(cell) for cell in row) + ' |')
    return out


def _summary(lines: Sequence[QuoteLineItem], options: RenderOptions, margin: Decimal) -> Tuple[str, ...]:
    subtotal = pricing_service.subtotal(line.line_total for line in lines)
    summary = [f"Subtotal: {money(subtotal)}"]
    if options.show_customer_price:
        customer_subtotal = pricing_service.subtotal(
            pricing_service.customer_line_total(line.discounted_price, margin, line.quantity)
            for line in lines
        )
        summary.append(f"Customer Subtotal: {money(customer_subtotal)}")
        summary.append(f"Distribution Profit: {money(customer_subtotal - subtotal)}")
    return tuple(summary)


def render_quote(
    lines: Sequence[QuoteLineItem],
    discount_name: str,
    options: Optional[RenderOptions] = None,
    issued_on: Optional[date] = None,
) -> str:
    """
    Render the quote text handed to the clipboard/email.

    Raises:
        ValidationError: customer prices requested without a valid margin.
    """
    options = options or RenderOptions()
    fmt = QuoteFormat.parse(options.format)

    margin = Decimal('0')
    if options.show_customer_price:
        if options.margin is None:
            raise ValidationError('A margin is required to show customer prices.')
        margin = pricing_service.validate_margin(options.margin)

    lines = list(lines)
    out = [
        f"QUOTE SUMMARY ({quote_date(issued_on)})",
        f"Discount Applied: {discount_name or 'None'} ({multiplier(discount_multiplier(lines))})",
        '',
    ]

    if fmt is QuoteFormat.BULLET_LIST:
        out += _render_bullets(lines, options, margin)
    else:
        table = [_columns(options)] + [_row(line, options, margin) for line in lines]
        if fmt is QuoteFormat.TAB_DELIMITED:
            out += _render_tabs(table)
        else:
            out += _render_markdown(table)

    out.append('')
    out += _summary(lines, options, margin)

    notes = options.additional_notes
    if notes and notes.strip():
        out += ['', 'Additional Notes:', notes]

    return '\n'.join(out) + '\n'
