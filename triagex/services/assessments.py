from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from triagex.models.assessment import Assessment
from triagex.services.diagnosis import Diagnosis, classify, diagnose, normalize, resolve
from triagex.utils.exceptions import InvalidInput, NotFound, StorageError

logger = logging.getLogger("triagex")

SUBMIT_ERROR_MESSAGE = "Server error during symptom analysis"
HISTORY_ERROR_MESSAGE = "Server error while retrieving triage history"
RESULT_ERROR_MESSAGE = "Server error while retrieving triage result"


def validate_reports(reports: Any) -> List[str]:
    """Return the normalized symptom names or raise InvalidInput."""
    if not reports or not isinstance(reports, (list, tuple)):
        raise InvalidInput("Please provide a valid symptoms array")

    names = normalize(reports)
    if not names:
        raise InvalidInput("Please provide at least one valid symptom")
    return names


def preview(reports: Any) -> Diagnosis:
    """Diagnose without touching the record store."""
    validate_reports(reports)
    return diagnose(reports)


def submit(db: Session, user_id: str, reports: Any) -> Assessment:
    """Diagnose ``reports`` and persist the outcome for ``user_id``.

    ``reports`` is stored exactly as received; only the diagnosis text is
    derived. Raises InvalidInput for a missing/empty payload or one with no
    usable symptom names, StorageError if the row cannot be written.
    """
    names = validate_reports(reports)
    diagnosis = resolve(names)
    record = Assessment(
        user_id=str(user_id),
        symptoms=list(reports),
        diagnosis=diagnosis,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception({"function": "submit", "status": "storage_error", "user_id": str(user_id)})
        raise StorageError(SUBMIT_ERROR_MESSAGE) from exc

    logger.info({
        "function": "submit",
        "status": "inserted",
        "assessment_id": str(record.id),
        "priority": classify(diagnosis).value,
    })
    return record


def list_history(db: Session, user_id: str) -> List[Assessment]:
    """All assessments for ``user_id``, newest first."""
    stmt = (
        select(Assessment)
        .where(Assessment.user_id == str(user_id))
        .order_by(Assessment.created_at.desc(), Assessment.id.desc())
    )
    try:
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception({"function": "list_history", "status": "storage_error", "user_id": str(user_id)})
        raise StorageError(HISTORY_ERROR_MESSAGE) from exc


def get_by_id(db: Session, user_id: str, assessment_id: str) -> Assessment:
    # Absent and not-owned are reported identically
    stmt = select(Assessment).where(
        Assessment.id == str(assessment_id),
        Assessment.user_id == str(user_id),
    )
    try:
        record = db.scalars(stmt).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception({"function": "get_by_id", "status": "storage_error", "user_id": str(user_id)})
        raise StorageError(RESULT_ERROR_MESSAGE) from exc
    if record is None:
        raise NotFound("Triage result not found")
    return record


def as_utc(value: datetime) -> datetime:
    # SQLite hands DateTime(timezone=True) back naive; stored values are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_result(record: Assessment) -> Dict[str, Any]:
    """Response shape shared by submit, history and lookup."""
    return {
        "id": str(record.id),
        "symptoms": record.symptoms if record.symptoms is not None else [],
        "priority": classify(record.diagnosis).value,
        "recommendation": {"message": record.diagnosis},
        "createdAt": as_utc(record.created_at),
    }


__all__ = [
    "validate_reports",
    "preview",
    "submit",
    "list_history",
    "get_by_id",
    "as_utc",
    "to_result",
    "SUBMIT_ERROR_MESSAGE",
    "HISTORY_ERROR_MESSAGE",
    "RESULT_ERROR_MESSAGE",
]
