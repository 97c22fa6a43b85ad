"""
Inventory store through the HTTP API: products, stock movements, pricing,
reports and settings.
"""

from openstock.models.log import HRLog, InventoryLog


def _movements(client, product_id):
    resp = client.get("/stock-movements/", params={"product_id": product_id, "page_size": 100})
    assert resp.status_code == 200
    return resp.json()


def _stock(client, product_id):
    return client.get(f"/products/{product_id}").json()["stock_quantity"]


def _move(client, product_id, type, quantity, **extra):
    return client.post("/stock-movements/", json={"product_id": product_id, "type": type, "quantity": quantity, **extra})


# =============================================================================
# PRODUCTS
# =============================================================================


class TestProducts:
    def test_create_derives_price_from_default_margin(self, make_product):
        product = make_product(cost_price=100)
        assert product["selling_price"] == 130
        assert product["margin_percent"] == 30
        assert product["stock_quantity"] == 0
        assert product["id"].startswith("prd_")

    def test_opening_stock_is_recorded_as_movement(self, client, make_product):
        product = make_product(stock_quantity=10)
        assert product["stock_quantity"] == 10

        page = _movements(client, product["id"])
        assert page["total"] == 1
        m = page["items"][0]
        assert (m["type"], m["quantity"], m["stock_before"], m["stock_after"]) == ("in", 10, 0, 10)

    def test_duplicate_sku(self, client, make_product):
        make_product(sku="FR-1")
        resp = client.post("/products/", json={"name": "Other", "sku": "FR-1"})
        assert resp.status_code == 400

    def test_update_cannot_touch_stock(self, client, make_product):
        product = make_product(stock_quantity=5)
        resp = client.put(f"/products/{product['id']}", json={"name": "Big fridge", "stock_quantity": 999})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Big fridge"
        assert resp.json()["stock_quantity"] == 5

    def test_null_for_required_field_is_rejected(self, client, make_product):
        product = make_product(description="Double door")
        resp = client.put(f"/products/{product['id']}", json={"stock_min": None})
        assert resp.status_code == 400
        assert "stock_min" in resp.json()["detail"]
        assert client.get(f"/products/{product['id']}").json()["stock_min"] == 2

        resp = client.put(f"/products/{product['id']}", json={"description": None})
        assert resp.status_code == 200
        assert resp.json()["description"] is None

    def test_price_change_recomputes_margin_and_keeps_history(self, client, make_product):
        product = make_product(cost_price=100)
        resp = client.put(f"/products/{product['id']}", json={"selling_price": 150})
        assert resp.json()["margin_percent"] == 50

        history = client.get(f"/products/{product['id']}/price-history").json()
        assert sorted(h["price"] for h in history) == [130, 150]

    def test_list_filters(self, client, make_product):
        make_product(name="Washer", stock_quantity=10, stock_min=2)
        make_product(name="Freezer", stock_quantity=1, stock_min=2)

        assert client.get("/products/", params={"q": "wash"}).json()["total"] == 1
        low = client.get("/products/", params={"low_stock": True}).json()
        assert [p["name"] for p in low["items"]] == ["Freezer"]
        assert low["items"][0]["is_low_stock"] is True

    def test_missing_product(self, client):
        assert client.get("/products/prd_missing").status_code == 404


# =============================================================================
# STOCK MOVEMENTS
# =============================================================================


class TestStockMovements:
    def test_running_total_matches_movements(self, client, make_product):
        product = make_product(stock_quantity=10)
        assert _move(client, product["id"], "in", 5).status_code == 201
        assert _move(client, product["id"], "out", 3).status_code == 201
        resp = _move(client, product["id"], "adjustment", 20)
        assert resp.status_code == 201
        assert resp.json()["quantity"] == 8

        items = _movements(client, product["id"])["items"]
        for m in items:
            assert m["stock_after"] == m["stock_before"] + m["quantity"]
        assert sum(m["quantity"] for m in items) == 20
        assert _stock(client, product["id"]) == 20

    def test_same_request_twice_applies_twice(self, client, make_product):
        product = make_product(stock_quantity=0)
        first = _move(client, product["id"], "in", 5)
        second = _move(client, product["id"], "in", 5)

        assert first.status_code == second.status_code == 201
        assert first.json()["id"] != second.json()["id"]
        assert _stock(client, product["id"]) == 10
        assert _movements(client, product["id"])["total"] == 2

    def test_insufficient_stock_changes_nothing(self, client, make_product):
        product = make_product(stock_quantity=2)
        resp = _move(client, product["id"], "out", 5)

        assert resp.status_code == 400
        assert "Insufficient stock" in resp.json()["detail"]
        assert _stock(client, product["id"]) == 2
        assert _movements(client, product["id"])["total"] == 1

    def test_negative_stock_policy(self, client, make_product):
        client.app.state.settings.ALLOW_NEGATIVE_STOCK = True
        product = make_product(stock_quantity=2)
        resp = _move(client, product["id"], "out", 5)
        assert resp.status_code == 201
        assert _stock(client, product["id"]) == -3

    def test_unknown_product(self, client):
        assert _move(client, "prd_missing", "in", 1).status_code == 404

    def test_variant_movement_moves_variant_counter(self, client, make_product):
        product = make_product(stock_quantity=10)
        resp = client.post(f"/products/{product['id']}/variants", json={"name": "Silver", "cost_price": 110, "stock_quantity": 4})
        assert resp.status_code == 201
        variant = resp.json()
        assert variant["stock_quantity"] == 4
        assert variant["price"] == 143

        resp = _move(client, product["id"], "out", 1, variant_id=variant["id"])
        assert resp.status_code == 201
        moved = resp.json()
        assert moved["variant_id"] == variant["id"]
        assert (moved["stock_before"], moved["stock_after"]) == (4, 3)

        variants = client.get(f"/products/{product['id']}/variants").json()
        assert variants[0]["stock_quantity"] == 3
        assert _stock(client, product["id"]) == 10

        # The product trail only holds product-level movements
        product_trail = _movements(client, product["id"])["items"]
        assert len(product_trail) == 1
        assert product_trail[0]["variant_id"] is None
        assert product_trail[0]["stock_after"] == _stock(client, product["id"])

        resp = client.get("/stock-movements/", params={"variant_id": variant["id"]})
        variant_trail = resp.json()["items"]
        assert {m["id"] for m in variant_trail} >= {moved["id"]}
        assert all(m["variant_id"] == variant["id"] for m in variant_trail)
        assert sum(m["quantity"] for m in variant_trail) == variants[0]["stock_quantity"]

    def test_delivery(self, client, make_product):
        a = make_product(name="Oven", stock_quantity=1)
        b = make_product(name="Hob", stock_quantity=0)
        resp = client.post("/stock-movements/delivery", json={
            "items": [
                {"product_id": a["id"], "quantity": 4, "unit_cost": 90},
                {"product_id": b["id"], "quantity": 2},
            ],
            "reference": "DN-001",
        })
        assert resp.status_code == 201
        assert len(resp.json()["movements"]) == 2
        assert _stock(client, a["id"]) == 5
        assert _stock(client, b["id"]) == 2

    def test_delivery_with_unknown_product_is_all_or_nothing(self, client, make_product):
        a = make_product(name="Oven", stock_quantity=1)
        resp = client.post("/stock-movements/delivery", json={
            "items": [
                {"product_id": a["id"], "quantity": 4},
                {"product_id": "prd_missing", "quantity": 2},
            ],
        })
        assert resp.status_code == 404
        assert _stock(client, a["id"]) == 1


# =============================================================================
# PRICING
# =============================================================================


class TestSupplierPrices:
    def _supplier(self, client, name):
        return client.post("/suppliers/", json={"name": name}).json()

    def test_single_preferred_and_history(self, client, make_product):
        product = make_product()
        s1 = self._supplier(client, "Acme")
        s2 = self._supplier(client, "Globex")
        url = f"/products/{product['id']}/supplier-prices"

        p1 = client.post(url, json={"supplier_id": s1["id"], "price": 90, "is_preferred": True}).json()
        p2 = client.post(url, json={"supplier_id": s2["id"], "price": 95, "is_preferred": True}).json()

        prices = {p["id"]: p for p in client.get(url).json()}
        assert prices[p2["id"]]["is_preferred"] is True
        assert prices[p1["id"]]["is_preferred"] is False
        assert prices[p1["id"]]["supplier_name"] == "Acme"

        resp = client.put(f"{url}/{p1['id']}", json={"price": 85, "changed_by": "buyer"})
        assert resp.json()["price"] == 85
        history = client.get(f"{url}/{p1['id']}/history").json()
        assert sorted(h["price"] for h in history) == [85, 90]


# =============================================================================
# REPORTS AND DASHBOARD
# =============================================================================


class TestReports:
    def test_low_stock_ranking(self, client, make_product):
        make_product(name="A", stock_quantity=1, stock_min=2)
        make_product(name="B", stock_quantity=0, stock_min=5)
        make_product(name="C", stock_quantity=10, stock_min=2)
        make_product(name="D", stock_quantity=0, stock_min=5, is_active=False)

        page = client.get("/reports/low-stock").json()
        assert page["total"] == 2
        assert [(i["name"], i["gap"]) for i in page["items"]] == [("B", -5), ("A", -1)]

    def test_dashboard(self, client, make_product):
        a = make_product(name="A", cost_price=100, stock_quantity=10, stock_min=2)
        make_product(name="B", cost_price=50, stock_quantity=1, stock_min=2)
        client.post("/suppliers/", json={"name": "Acme"})
        _move(client, a["id"], "out", 3, unit_cost=100)

        stats = client.get("/dashboard/stats").json()
        assert stats["total_products"] == 2
        assert stats["total_suppliers"] == 1
        assert stats["low_stock_count"] == 1
        assert stats["low_stock_products"][0]["name"] == "B"
        assert stats["total_stock_value"] == 100 * 7 + 50 * 1
        assert stats["moved_out_quantity"] == 3
        assert stats["moved_out_value"] == 300
        assert stats["moved_out_count"] == 1
        assert len(stats["recent_movements"]) == 3


# =============================================================================
# CATALOGUE AND SETTINGS
# =============================================================================


class TestCatalogue:
    def test_category_counts_and_delete(self, client, make_product):
        cat = client.post("/categories/", json={"name": "Cooling"}).json()
        product = make_product(category_id=cat["id"])

        listed = client.get("/categories/").json()
        assert listed[0]["product_count"] == 1

        assert client.delete(f"/categories/{cat['id']}").status_code == 200
        assert client.get(f"/products/{product['id']}").json()["category_id"] is None

    def test_unknown_category_on_product(self, client):
        resp = client.post("/products/", json={"name": "X", "category_id": "cat_missing"})
        assert resp.status_code == 404

    def test_single_default_tax(self, client):
        t1 = client.post("/taxes/", json={"name": "Standard", "rate": 20, "is_default": True}).json()
        client.post("/taxes/", json={"name": "Reduced", "rate": 5.5, "is_default": True})
        taxes = {t["id"]: t for t in client.get("/taxes/").json()}
        assert taxes[t1["id"]]["is_default"] is False
        assert sum(t["is_default"] for t in taxes.values()) == 1

    def test_settings_default_margin_is_used(self, client, make_product):
        settings = client.get("/settings/").json()
        assert settings["business_name"] == "OpenStock Inc."
        assert settings["default_margin"] == 30

        client.put("/settings/", json={"default_margin": 50})
        assert make_product(cost_price=100)["selling_price"] == 150


def test_audit_log_stays_in_its_store(client, make_product):
    make_product()
    stores = client.app.state.stores

    inventory = stores.inventory.SessionLocal()
    hr = stores.hr.SessionLocal()
    try:
        actions = [log.action for log in inventory.query(InventoryLog).all()]
        assert "PRODUCT_CREATE" in actions
        assert hr.query(HRLog).count() == 0
    finally:
        inventory.close()
        hr.close()


def test_lost_audit_entry_does_not_fail_the_request(client, caplog):
    InventoryLog.__table__.drop(client.app.state.stores.inventory.engine)

    resp = client.post("/products/", json={"name": "Kettle", "cost_price": 10})
    assert resp.status_code == 201
    assert resp.json()["name"] == "Kettle"
    assert client.get(f"/products/{resp.json()['id']}").status_code == 200
    assert "Audit log write failed" in caplog.text
