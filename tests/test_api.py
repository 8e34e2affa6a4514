import unittest
from decimal import Decimal

from fastapi.testclient import TestClient
from stockcare.database import create_db_engine, get_db, init_db, make_session_factory, session_scope
from stockcare.main import app


class ApiTest(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite://")
        init_db(self.engine)
        factory = make_session_factory(self.engine)

        def override_get_db():
            with session_scope(factory) as db:
                yield db

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def create_product(self, **overrides):
        payload = {
            "name": "Widget",
            "purchase_price": "30.00",
            "sale_price": "50.00",
            "current_stock": 5,
            "minimum_stock": 2,
        }
        payload.update(overrides)
        response = self.client.post("/products", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def post_movement(self, product_id, kind, quantity, **extra):
        payload = {"product_id": product_id, "kind": kind, "quantity": quantity}
        payload.update(extra)
        return self.client.post("/movements", json=payload)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "ok")

    def test_root_redirects_to_dashboard(self):
        response = self.client.get("/", follow_redirects=False)
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/dashboard")

    def test_product_crud(self):
        product = self.create_product()
        self.assertEqual(product["version"], 1)
        self.assertEqual(Decimal(product["sale_price"]), Decimal("50"))

        listed = self.client.get("/products").json()
        self.assertEqual([p["id"] for p in listed], [product["id"]])

        response = self.client.patch(
            "/products/{}".format(product["id"]),
            json={"category": "Parts", "version": 1},
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["category"], "Parts")
        self.assertEqual(response.json()["version"], 2)

        response = self.client.put(
            "/products/{}".format(product["id"]),
            json={
                "name": "Widget XL",
                "purchase_price": "31.00",
                "sale_price": "52.00",
                "current_stock": 5,
                "minimum_stock": 2,
                "version": 2,
            },
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["name"], "Widget XL")
        self.assertIsNone(response.json()["category"])

        response = self.client.delete("/products/{}".format(product["id"]))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.client.get("/products/{}".format(product["id"])).status_code, 404)
        self.assertEqual(self.client.delete("/products/{}".format(product["id"])).status_code, 404)

    def test_create_product_validation_errors(self):
        response = self.client.post(
            "/products",
            json={"name": " ", "purchase_price": "-1", "sale_price": "5"},
        )
        self.assertEqual(response.status_code, 422)
        fields = [error["field"] for error in response.json()["errors"]]
        self.assertEqual(fields, ["name", "purchase_price"])

    def test_stale_update_conflicts(self):
        product = self.create_product()
        path = "/products/{}".format(product["id"])
        self.assertEqual(self.client.patch(path, json={"name": "A", "version": 1}).status_code, 200)

        response = self.client.patch(path, json={"name": "B", "version": 1})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.client.get(path).json()["name"], "A")

    def test_update_unknown_product(self):
        response = self.client.patch("/products/99", json={"name": "X", "version": 1})
        self.assertEqual(response.status_code, 404)

    def test_replace_requires_stock_levels(self):
        product = self.create_product(current_stock=0)
        self.assertEqual(self.post_movement(product["id"], "purchase", 7).status_code, 201)
        path = "/products/{}".format(product["id"])
        version = self.client.get(path).json()["version"]

        response = self.client.put(
            path,
            json={"name": "Widget", "purchase_price": "30.00", "sale_price": "50.00", "version": version},
        )

        self.assertEqual(response.status_code, 422)
        missing = {error["loc"][-1] for error in response.json()["detail"]}
        self.assertEqual(missing, {"current_stock", "minimum_stock"})
        self.assertEqual(self.client.get(path).json()["current_stock"], 7)

    def test_updates_require_version(self):
        product = self.create_product()
        path = "/products/{}".format(product["id"])

        response = self.client.patch(path, json={"name": "Renamed"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"][0]["loc"][-1], "version")

        response = self.client.put(
            path,
            json={
                "name": "Renamed",
                "purchase_price": "30.00",
                "sale_price": "50.00",
                "current_stock": 5,
                "minimum_stock": 2,
            },
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"][0]["loc"][-1], "version")
        self.assertEqual(self.client.get(path).json()["name"], "Widget")

    def test_create_rejects_prices_beyond_column_precision(self):
        response = self.client.post(
            "/products",
            json={"name": "Widget", "purchase_price": "1.005", "sale_price": "2.999"},
        )
        self.assertEqual(response.status_code, 422)
        fields = [error["field"] for error in response.json()["errors"]]
        self.assertEqual(fields, ["purchase_price", "sale_price"])

        response = self.client.post(
            "/products",
            json={"name": "Widget", "purchase_price": "10000000000", "sale_price": "1"},
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["errors"][0]["field"], "purchase_price")
        self.assertEqual(self.client.get("/products").json(), [])

    def test_oversized_quantity_is_a_validation_error(self):
        product = self.create_product(current_stock=5)

        response = self.post_movement(product["id"], "purchase", 10**20)

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["errors"][0]["field"], "quantity")
        self.assertEqual(self.client.get("/products/{}".format(product["id"])).json()["current_stock"], 5)

    def test_movements_flow(self):
        product = self.create_product(current_stock=5)

        response = self.post_movement(product["id"], "purchase", 3, notes="Restock")
        self.assertEqual(response.status_code, 201, response.text)
        purchase = response.json()
        self.assertEqual(purchase["kind"], "purchase")
        self.assertEqual(purchase["product_name"], "Widget")
        self.assertIsNotNone(purchase["timestamp"])

        response = self.post_movement(product["id"], "sale", 8)
        self.assertEqual(response.status_code, 201, response.text)

        detail = self.client.get("/products/{}".format(product["id"])).json()
        self.assertEqual(detail["current_stock"], 0)
        self.assertEqual(len(detail["movements"]), 2)
        self.assertEqual({m["product_name"] for m in detail["movements"]}, {"Widget"})

        self.assertEqual(len(self.client.get("/movements").json()), 2)
        fetched = self.client.get("/movements/{}".format(purchase["id"]))
        self.assertEqual(fetched.json()["notes"], "Restock")
        self.assertEqual(self.client.get("/movements").json()[0]["product_name"], "Widget")

    def test_movement_errors(self):
        product = self.create_product(current_stock=1)

        response = self.post_movement(product["id"], "sale", 2)
        self.assertEqual(response.status_code, 422)
        self.assertIn("Insufficient stock", response.json()["detail"])

        response = self.post_movement(product["id"], "sale", 0)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["errors"][0]["field"], "quantity")

        self.assertEqual(self.post_movement(999, "sale", 1).status_code, 404)
        self.assertEqual(self.post_movement(product["id"], "refund", 1).status_code, 422)
        self.assertEqual(self.client.get("/movements/5").status_code, 404)
        self.assertEqual(self.client.get("/movements").json(), [])

    def test_dashboard(self):
        widget = self.create_product(name="Widget", current_stock=10, minimum_stock=2)
        low = self.create_product(name="Bolt", current_stock=1, minimum_stock=4)
        self.post_movement(widget["id"], "sale", 3)
        self.post_movement(widget["id"], "sale", 2)

        response = self.client.get("/dashboard")
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["total_products"], 2)
        self.assertEqual(body["low_stock_count"], 1)
        self.assertEqual(body["low_stock_products"][0]["id"], low["id"])
        self.assertEqual(body["top_sold"], [{"product_id": widget["id"], "name": "Widget", "quantity": 5}])
        entry = body["profitability"][0]
        self.assertEqual(Decimal(entry["profit_per_unit"]), Decimal("20"))
        self.assertEqual(Decimal(entry["total_profit"]), Decimal("100"))

        self.assertEqual(len(self.client.get("/dashboard/top-sold?limit=1").json()), 1)
        self.assertEqual(len(self.client.get("/dashboard/low-stock").json()), 1)
        self.assertEqual(len(self.client.get("/dashboard/profitability").json()), 1)


if __name__ == "__main__":
    unittest.main()
