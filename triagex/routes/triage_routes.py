# triagex/routes/triage_routes.py
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session

from triagex.db.session import get_db
from triagex.models.user import User
from triagex.auth.deps import get_current_user
from triagex.schemas.triage import (
    AssessmentResult,
    CatalogResponse,
    HistoryResponse,
    PreviewResult,
)
from triagex.services import assessments as assessments_service
from triagex.services import catalog as catalog_service
from triagex.utils.rate_limit import limiter, user_rate_key, TRIAGE_RATE_LIMIT


router = APIRouter(prefix="/api/triage", tags=["triage"])
logger = logging.getLogger("triagex")


def _symptoms_from(payload: Any) -> Any:
    # Any body shape is accepted here so the service reports bad payloads as InvalidInput
    if isinstance(payload, dict):
        return payload.get("symptoms")
    return None


@router.post("/", response_model=AssessmentResult, status_code=status.HTTP_201_CREATED)
@router.post("/submit", response_model=AssessmentResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(TRIAGE_RATE_LIMIT, key_func=user_rate_key)
def submit_triage(
    request: Request,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Diagnose the submitted symptoms, persist the assessment and return it."""
    reports = _symptoms_from(payload)
    record = assessments_service.submit(db, current_user.id, reports)
    return assessments_service.to_result(record)


@router.get("/history", response_model=HistoryResponse)
def get_triage_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    records = assessments_service.list_history(db, current_user.id)
    history = [assessments_service.to_result(r) for r in records]
    return {"data": {"history": history, "count": len(history)}}


@router.get("/results/{assessment_id}", response_model=AssessmentResult)
def get_triage_result(
    assessment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    record = assessments_service.get_by_id(db, current_user.id, assessment_id)
    return assessments_service.to_result(record)


@router.post("/preview", response_model=PreviewResult)
def preview_triage(
    payload: Any = Body(None),
    current_user: User = Depends(get_current_user),
):
    """Run the rules without persisting anything."""
    reports = _symptoms_from(payload)
    result = assessments_service.preview(reports)
    return {
        "symptoms": list(result.symptoms),
        "diagnosis": result.diagnosis,
        "priority": result.priority,
    }


@router.get("/symptoms", response_model=CatalogResponse)
def list_symptom_catalog():
    items = catalog_service.load_catalog()
    return {"symptoms": items, "count": len(items)}
