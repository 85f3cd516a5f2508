"""
Integration tests for the Flask CLI commands.
"""

from pantrypal.models import User, RetailerProfile, Product, Batch, Sale


class TestInitDb:

    def test_creates_schema(self, app):
        result = app.test_cli_runner().invoke(args=['init-db'])

        assert result.exit_code == 0
        assert 'Database schema ready.' in result.output

    def test_drop_wipes_data_after_confirmation(self, app, session, product):
        result = app.test_cli_runner().invoke(args=['init-db', '--drop'], input='y\n')

        assert result.exit_code == 0
        assert 'Dropped all tables.' in result.output
        assert session.query(Product).count() == 0

    def test_drop_aborts_without_confirmation(self, app, session, product):
        result = app.test_cli_runner().invoke(args=['init-db', '--drop'], input='n\n')

        assert result.exit_code != 0
        assert session.query(Product).count() == 1


class TestSeedDemo:

    def test_seeds_users_catalogue_and_stock(self, app, session):
        result = app.test_cli_runner().invoke(
            args=['seed-demo', '--products', '6', '--batches', '12', '--sales', '3', '--seed', '7']
        )

        assert result.exit_code == 0, result.output
        assert 'Seed completed successfully!' in result.output
        assert session.query(User).count() == 4
        assert {r.shop_name for r in session.query(RetailerProfile)} == {'Fresh Mart', 'Daily Needs'}
        assert session.query(Product).count() == 6
        assert session.query(Batch).count() == 12

        batches = session.query(Batch).all()
        assert all(b.expiry_date > b.mfd_date for b in batches)
        assert all(0 <= b.quantity_available <= b.quantity_total for b in batches)

        sales = session.query(Sale).all()
        assert len(sales) == result.output.count('claim code')
        assert len(sales) <= 3
        assert all(not s.is_claimed for s in sales)

    def test_refuses_to_seed_twice(self, app, session):
        runner = app.test_cli_runner()
        runner.invoke(args=['seed-demo', '--products', '2', '--batches', '2', '--sales', '0'])

        result = runner.invoke(args=['seed-demo', '--products', '2', '--batches', '2', '--sales', '0'])

        assert result.exit_code == 0
        assert 'Demo data already present' in result.output
        assert session.query(Product).count() == 2
