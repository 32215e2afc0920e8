import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text
from datetime import datetime

from app.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    store_status = "ok"

    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Store ping failed")
        store_status = "failed"

    return {
        "status": "ok" if store_status == "ok" else "degraded",
        "store": store_status,
        "timestamp": datetime.utcnow().isoformat()
    }
