"""
The three embedded stores: where they live and how they behave.
"""

from pathlib import Path

import pytest
from sqlalchemy import text

from openstock.database import transaction
from openstock.models.finance import Transaction


def test_each_store_has_its_own_file(client, settings):
    data_dir = Path(settings.DATA_DIR)
    assert (data_dir / "db.sqlite").exists()
    assert (data_dir / "hr.sqlite").exists()
    assert (data_dir / "finance.sqlite").exists()


@pytest.mark.parametrize("name", ["inventory", "hr", "finance"])
def test_store_runs_in_wal_mode_with_foreign_keys(client, name):
    store = getattr(client.app.state.stores, name)
    with store.engine.connect() as conn:
        assert conn.execute(text("PRAGMA journal_mode")).scalar().lower() == "wal"
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_tables_do_not_leak_between_stores(client):
    stores = client.app.state.stores
    assert "products" in stores.inventory.base.metadata.tables
    assert "products" not in stores.hr.base.metadata.tables
    assert "employees" not in stores.finance.base.metadata.tables
    assert "transactions" in stores.finance.base.metadata.tables


def test_transaction_rolls_back_on_error(client):
    db = client.app.state.stores.finance.SessionLocal()
    try:
        with pytest.raises(RuntimeError):
            with transaction(db):
                db.add(Transaction(
                    id="txn_rollback", type="in", business_line="appliance", description="x", amount=1,
                ))
                db.flush()
                raise RuntimeError("boom")
        assert db.query(Transaction).count() == 0
    finally:
        db.close()


def test_root(client):
    assert client.get("/").json() == {"message": "OpenStock API is running"}
