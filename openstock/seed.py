# openstock/seed.py
"""Create the three stores and fill in the default rows.

Usage::

    python -m openstock.seed            # settings row, taxes, leave types
    python -m openstock.seed --check    # only print row counts per table

Safe to run repeatedly: rows that already exist are left alone.
"""
import argparse
import logging

from sqlalchemy import inspect, text

from openstock.config import Settings
from openstock.database import Stores, open_stores
from openstock.models.catalog import Tax
from openstock.models.leave import LeaveType
from openstock.models.settings import BusinessSettings
from openstock.utils.ids import generate_id

logger = logging.getLogger("openstock.seed")

DEFAULT_TAXES = [
    # (name, rate, is_default)
    ("Standard rate", 20.0, True),
    ("Intermediate rate", 10.0, False),
    ("Reduced rate", 5.5, False),
    ("Zero rate", 0.0, False),
]

DEFAULT_LEAVE_TYPES = [
    # (name, default_days, is_paid, color)
    ("Annual leave", 25, True, "#10B981"),
    ("Sick leave", 10, True, "#F59E0B"),
    ("Parental leave", 0, True, "#6366F1"),
    ("Unpaid leave", 0, False, "#6B7280"),
]


def seed_inventory(stores: Stores) -> None:
    db = stores.inventory.SessionLocal()
    try:
        if not db.get(BusinessSettings, 1):
            db.add(BusinessSettings(id=1))
            logger.info("Inserted default settings")

        existing = {name for (name,) in db.query(Tax.name)}
        for name, rate, is_default in DEFAULT_TAXES:
            if name not in existing:
                db.add(Tax(id=generate_id("tax"), name=name, rate=rate, is_default=is_default))
                logger.info("Inserted tax %s (%s%%)", name, rate)
        db.commit()
    finally:
        db.close()


def seed_hr(stores: Stores) -> None:
    db = stores.hr.SessionLocal()
    try:
        existing = {name for (name,) in db.query(LeaveType.name)}
        for name, days, is_paid, color in DEFAULT_LEAVE_TYPES:
            if name not in existing:
                db.add(LeaveType(id=generate_id("lvt"), name=name, default_days=days, is_paid=is_paid, color=color))
                logger.info("Inserted leave type %s", name)
        db.commit()
    finally:
        db.close()


def check(stores: Stores) -> None:
    for store in (stores.inventory, stores.hr, stores.finance):
        print(f"[{store.name}] {store.engine.url}")
        with store.engine.connect() as conn:
            for table in sorted(inspect(conn).get_table_names()):
                count = conn.execute(text(f'SELECT COUNT(*) FROM "{table}"')).scalar()
                print(f"  {table:<28} {count}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Initialise the OpenStock stores")
    parser.add_argument("--check", action="store_true", help="only report row counts")
    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")

    stores = open_stores(settings)
    try:
        if not args.check:
            seed_inventory(stores)
            seed_hr(stores)
        check(stores)
    finally:
        stores.dispose()


if __name__ == "__main__":
    main()
