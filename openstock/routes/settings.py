# openstock/routes/settings.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.settings import BusinessSettings
from openstock.schemas.settings import SettingsOut, SettingsUpdate
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update

router = APIRouter(prefix="/settings", tags=["Settings"])


def _get_or_create(db: Session) -> BusinessSettings:
    row = db.get(BusinessSettings, 1)
    if not row:
        # Seed the single row with column defaults on first access
        row = BusinessSettings(id=1)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


@router.get("/", response_model=SettingsOut)
def get_settings(db: Session = Depends(get_inventory_db)):
    return _get_or_create(db)


@router.put("/", response_model=SettingsOut)
def update_settings(payload: SettingsUpdate, request: Request, db: Session = Depends(get_inventory_db)):
    row = _get_or_create(db)
    changes = apply_update(row, payload)
    db.commit()
    db.refresh(row)

    write_log(
        db, action="SETTINGS_UPDATE", resource="settings", ip=client_ip(request),
        meta={"fields": sorted(changes)},
    )
    return row
