# triagex/schemas/triage.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from triagex.services.diagnosis import Priority


class Recommendation(BaseModel):
    message: str


class AssessmentResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    symptoms: List[Any]
    priority: Priority
    recommendation: Recommendation
    created_at: datetime = Field(..., alias="createdAt")


class HistoryData(BaseModel):
    history: List[AssessmentResult]
    count: int


class HistoryResponse(BaseModel):
    success: bool = True
    message: str = "Triage history retrieved successfully"
    data: HistoryData


class PreviewResult(BaseModel):
    symptoms: List[str]
    diagnosis: str
    priority: Priority


class CatalogSymptom(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    severity: Optional[str] = None
    category: Optional[str] = None


class CatalogResponse(BaseModel):
    symptoms: List[CatalogSymptom]
    count: int
