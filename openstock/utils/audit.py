import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from openstock.models.log import LOG_MODELS
from openstock.utils.ids import generate_id

logger = logging.getLogger("openstock.audit")


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


def write_log(db: Session, *, action, resource, status="SUCCESS", ip=None, meta=None):
    # The session knows which store it belongs to; the entry goes to that store's logs table
    log_model = LOG_MODELS[db.info["store"]]
    entry = log_model(id=generate_id("log"), action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError:
        # The business change is already committed; a lost audit entry must not fail the request
        db.rollback()
        logger.exception("Audit log write failed: %s %s", action, resource)
        return
    logger.info("%s %s %s %s", action, resource, status, meta or {})
