# openstock/database.py
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# One declarative base per store: inventory, HR and finance never share tables.
InventoryBase = declarative_base()
HRBase = declarative_base()
FinanceBase = declarative_base()


def _sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """An independently persisted database with its own engine and sessions."""

    def __init__(self, name: str, url: str, base):
        self.name = name
        self.base = base

        is_sqlite = url.startswith("sqlite")
        if is_sqlite:
            db_file = make_url(url).database
            if db_file and db_file != ":memory:":
                Path(db_file).parent.mkdir(parents=True, exist_ok=True)
            connect_args = {"check_same_thread": False}  # SQLite only
        else:
            connect_args = {}

        self.engine = create_engine(url, connect_args=connect_args)
        if is_sqlite:
            event.listen(self.engine, "connect", _sqlite_pragmas)

        # The store name travels with every session so helpers (audit log) can find their tables
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine, info={"store": name}
        )

    def init_db(self) -> None:
        self.base.metadata.create_all(bind=self.engine)
        logger.info("Store %s ready (%d tables)", self.name, len(self.base.metadata.tables))

    def get_db(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


@dataclass(frozen=True)
class Stores:
    inventory: Store
    hr: Store
    finance: Store

    def dispose(self) -> None:
        for store in (self.inventory, self.hr, self.finance):
            store.dispose()


def open_stores(settings) -> Stores:
    """Create the three store handles and make sure their schemas exist."""
    # Registers every model on its base before create_all runs
    import openstock.models  # noqa: F401

    stores = Stores(
        inventory=Store("inventory", settings.inventory_url, InventoryBase),
        hr=Store("hr", settings.hr_url, HRBase),
        finance=Store("finance", settings.finance_url, FinanceBase),
    )
    stores.inventory.init_db()
    stores.hr.init_db()
    stores.finance.init_db()
    return stores


@contextmanager
def transaction(db: Session):
    """Commit everything done inside the block at once, or nothing at all."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def get_inventory_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.stores.inventory.get_db()


def get_hr_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.stores.hr.get_db()


def get_finance_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.stores.finance.get_db()
