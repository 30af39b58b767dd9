"""
Flask CLI commands for the catalog database.

Commands:
- flask init-db: Create the catalog tables
- flask check-catalog: Connectivity test with product/discount counts
"""

import click
from flask import current_app

from pricing_app.database import create_tables
from pricing_app.exceptions import CatalogUnavailableError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create the pricing and discounts tables if missing."""
        create_tables()
        click.echo(click.style('Catalog tables ready.', fg='green'))

    @app.cli.command('check-catalog')
    def check_catalog():
        """Test the catalog connection and report what it holds."""
        gateway = current_app.extensions['catalog_gateway']
        try:
            products = gateway.count_products()
            discounts = gateway.count_discounts()
        except CatalogUnavailableError as e:
            click.echo(click.style(f'Connection test failed: {e.message}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style('Connection test successful.', fg='green', bold=True))
        click.echo(f'   Products: {products}')
        click.echo(f'   Discount tiers: {discounts}')
        for discount in gateway.fetch_discounts():
            click.echo(f'   - {discount.name} (x{discount.multiplier:.4f})')
