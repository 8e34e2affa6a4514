import unittest
from decimal import Decimal

from sqlalchemy import func, select

from stockcare.database import create_db_engine, init_db, make_session_factory, session_scope
from stockcare.models.product import Product


class SessionScopeTest(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite://")
        init_db(self.engine)
        self.factory = make_session_factory(self.engine)

    def tearDown(self):
        self.engine.dispose()

    def product_count(self):
        with self.factory() as session:
            return session.execute(select(func.count(Product.id))).scalar_one()

    def test_commits_are_kept(self):
        with session_scope(self.factory) as db:
            db.add(Product(name="Widget", purchase_price=Decimal("1.00"), sale_price=Decimal("2.00")))
            db.commit()

        self.assertEqual(self.product_count(), 1)

    def test_error_rolls_back_pending_work(self):
        with self.assertRaises(RuntimeError):
            with session_scope(self.factory) as db:
                db.add(Product(name="Widget", purchase_price=Decimal("1.00"), sale_price=Decimal("2.00")))
                db.flush()
                raise RuntimeError("seed aborted")

        self.assertEqual(self.product_count(), 0)

    def test_committed_rows_stay_readable_after_close(self):
        with session_scope(self.factory) as db:
            product = Product(name="Widget", purchase_price=Decimal("1.00"), sale_price=Decimal("2.00"))
            db.add(product)
            db.commit()

        self.assertEqual(product.name, "Widget")
        self.assertEqual(product.version, 1)


if __name__ == "__main__":
    unittest.main()
