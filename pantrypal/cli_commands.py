"""
Flask CLI commands for database management.

Commands:
- flask init-db: Create all tables (optionally dropping them first)
- flask seed-demo: Load demo retailers, customers, products, batches and sales
"""

import random
from datetime import date, timedelta

import click

from pantrypal.database import Base, get_engine, get_session
from pantrypal.exceptions import PantryError
from pantrypal.models import User, UserRole, RetailerProfile, Product, Batch


DEMO_USERS = [
    {'name': 'Retailer One', 'phone': '9000000001', 'password': 'ret123', 'role': UserRole.RETAILER, 'shop': 'Fresh Mart'},
    {'name': 'Retailer Two', 'phone': '9000000002', 'password': 'ret234', 'role': UserRole.RETAILER, 'shop': 'Daily Needs'},
    {'name': 'Customer One', 'phone': '9000000003', 'password': 'cus345', 'role': UserRole.CUSTOMER},
    {'name': 'Customer Two', 'phone': '9000000004', 'password': 'cus456', 'role': UserRole.CUSTOMER},
]


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop all tables before creating them')
    def init_db_command(drop):
        """Create the database schema."""
        import pantrypal.models  # noqa: F401

        engine = get_engine()
        if drop:
            click.confirm('This deletes ALL data. Continue?', abort=True)
            Base.metadata.drop_all(engine)
            click.echo('Dropped all tables.')
        Base.metadata.create_all(engine)
        click.echo(click.style('Database schema ready.', fg='green'))

    @app.cli.command('seed-demo')
    @click.option('--products', 'product_count', default=120, show_default=True, help='Products to create')
    @click.option('--batches', 'batch_count', default=100, show_default=True, help='Batches for the first retailer')
    @click.option('--sales', 'sale_count', default=20, show_default=True, help='Unclaimed sales to record')
    @click.option('--seed', 'random_seed', type=int, default=None, help='Random seed for repeatable data')
    def seed_demo(product_count, batch_count, sale_count, random_seed):
        """Load demo data. Some batches are already expired, as in a real shop."""
        from pantrypal.services.sales_service import create_sale

        rng = random.Random(random_seed)
        session = get_session()
        today = date.today()

        if session.query(User.id).filter(User.phone == DEMO_USERS[0]['phone']).first():
            click.echo(click.style('Demo data already present; run "flask init-db --drop" first.', fg='red'))
            return

        try:
            retailers = []
            for spec in DEMO_USERS:
                user = User(name=spec['name'], phone=spec['phone'], role=spec['role'])
                user.set_password(spec['password'])
                session.add(user)
                session.flush()
                if user.is_retailer:
                    session.add(RetailerProfile(user_id=user.id, shop_name=spec['shop']))
                    retailers.append(user)

            products = []
            for i in range(1, product_count + 1):
                product = Product(
                    barcode=f'100000000{i}',
                    name=f'Product {i}',
                    brand=f'Brand {rng.randint(1, 10)}',
                    category=f'Category {rng.randint(1, 8)}',
                    unit=f'{rng.randint(100, 1000)} g',
                )
                session.add(product)
                products.append(product)
            session.flush()

            retailer_profile = retailers[0].retailer_profile
            for _ in range(batch_count):
                quantity_total = rng.randint(20, 200)
                # Includes batches that expired up to 10 days ago
                expiry_date = today + timedelta(days=rng.randint(-10, 60))
                session.add(Batch(
                    product_id=rng.choice(products).id,
                    retailer_id=retailer_profile.id,
                    mfd_date=expiry_date - timedelta(days=rng.randint(30, 180)),
                    expiry_date=expiry_date,
                    quantity_total=quantity_total,
                    quantity_available=rng.randint(5, quantity_total),
                    purchase_price=rng.randint(10, 50),
                    selling_price=rng.randint(20, 100),
                ))
            session.commit()
        except Exception as e:
            session.rollback()
            click.echo(click.style(f'Seed error: {e}', fg='red'))
            raise click.Abort()

        # Sales go through the real checkout so stock and totals stay consistent
        sellable = [
            row.product_id for row in
            session.query(Batch.product_id).filter(
                Batch.retailer_id == retailer_profile.id,
                Batch.expiry_date >= today,
                Batch.quantity_available > 0,
            ).distinct()
        ]
        created = 0
        for _ in range(sale_count if sellable else 0):
            items = [{'product_id': rng.choice(sellable), 'quantity': 1}]
            try:
                result = create_sale(session, retailers[0].id, items, today=today)
            except PantryError as e:
                click.echo(f'Skipped demo sale: {e.message}')
                continue
            created += 1
            click.echo(f'   Sale {result.sale_id}: claim code {result.claim_code}, total {result.total_amount}')

        click.echo(click.style('\nSeed completed successfully!', fg='green', bold=True))
        click.echo(f'   Products: {product_count}, batches: {batch_count}, sales: {created}')
