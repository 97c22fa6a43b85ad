from typing import Iterable

from fastapi import HTTPException
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def get_or_404(db: Session, model, obj_id: str, label: str):
    obj = db.query(model).filter(model.id == obj_id).first()
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def check_nulls(obj, changes: dict) -> None:
    """Reject an explicit null for any column that must always hold a value."""
    columns = inspect(obj).mapper.columns
    for key, value in changes.items():
        if value is not None or key not in columns:
            continue
        column = columns[key]
        # Only nullable columns without a default can be cleared
        if not column.nullable or column.default is not None:
            raise HTTPException(status_code=400, detail=f"Field '{key}' cannot be null")


def apply_update(obj, payload, exclude: Iterable[str] = ()) -> dict:
    """Copy the fields the client actually sent onto the ORM object; returns them."""
    changes = payload.model_dump(exclude_unset=True, exclude=set(exclude))
    check_nulls(obj, changes)
    for key, value in changes.items():
        setattr(obj, key, value)
    return changes


def delete_or_409(db: Session, obj, label: str) -> None:
    db.delete(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"{label} is still referenced and cannot be deleted")


def page_of(query, page: int, page_size: int) -> dict:
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}
