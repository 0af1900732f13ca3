"""Rule-based symptom triage.

Maps a collection of reported symptoms to a diagnosis text and a coarse
priority label. Everything here is pure: the rule table is built once at
import time and never mutated, so these helpers are safe to call from any
number of concurrent requests.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple


DEFAULT_DIAGNOSIS = "General Symptoms - Consider consulting a healthcare provider for proper evaluation"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class DiagnosisRule:
    required: frozenset
    diagnosis: str

    def matches(self, symptoms: frozenset) -> bool:
        return self.required <= symptoms


def _rule(diagnosis: str, *required: str) -> DiagnosisRule:
    return DiagnosisRule(required=frozenset(required), diagnosis=diagnosis)


# Evaluation order is precedence: combinations first, then single symptoms.
RULES: Tuple[DiagnosisRule, ...] = (
    _rule("Possible Heart Condition - Seek immediate medical attention", "chest pain", "shortness of breath"),
    _rule("Possible Meningitis - Seek immediate medical attention", "severe headache", "neck stiffness"),
    _rule("Possible Flu - Rest and stay hydrated", "fever", "cough", "fatigue"),
    _rule("Possible Strep Throat - Consider antibiotic treatment", "fever", "sore throat", "swollen glands"),
    _rule("Common Cold - Rest and fluids recommended", "runny nose", "sneezing", "cough"),
    _rule("Gastroenteritis - Stay hydrated and rest", "nausea", "vomiting", "diarrhea"),
    _rule("Possible Viral Infection - Rest and monitor symptoms", "headache", "muscle aches", "fatigue"),
    _rule("Fever - Monitor temperature and stay hydrated", "fever"),
    _rule("Headache - Rest and consider over-the-counter pain relief", "headache"),
    _rule("Cough - Stay hydrated and rest", "cough"),
    _rule("Sore Throat - Gargle with warm salt water", "sore throat"),
    _rule("Fatigue - Ensure adequate rest and nutrition", "fatigue"),
    _rule("Chest Pain - Seek medical attention promptly", "chest pain"),
    _rule("Breathing Difficulty - Seek medical attention", "shortness of breath"),
    _rule("Abdominal Pain - Monitor and consider medical evaluation", "abdominal pain"),
)

# Substring keywords per tier, checked against the lower-cased diagnosis.
HIGH_PRIORITY_KEYWORDS = ("immediate", "emergency", "seek medical attention promptly")
MEDIUM_PRIORITY_KEYWORDS = ("consider medical", "monitor")


def _report_name(report: Any) -> Any:
    if isinstance(report, str):
        return report
    if isinstance(report, dict):
        return report.get("name")
    return getattr(report, "name", None)


def normalize(reports: Sequence[Any]) -> List[str]:
    """Extract lower-cased symptom names, keeping input order.

    Reports may be bare strings or objects carrying a ``name``. Entries whose
    name is not a string, or is blank once stripped, are dropped.
    """
    names: List[str] = []
    for report in reports or ():
        name = _report_name(report)
        if not isinstance(name, str) or not name.strip():
            continue
        names.append(name.lower())
    return names


def resolve(symptoms: Iterable[str]) -> str:
    """Return the diagnosis of the first rule fully covered by ``symptoms``."""
    present = frozenset(symptoms)
    for rule in RULES:
        if rule.matches(present):
            return rule.diagnosis
    return DEFAULT_DIAGNOSIS


def classify(diagnosis: str) -> Priority:
    text = (diagnosis or "").lower()
    if any(k in text for k in HIGH_PRIORITY_KEYWORDS):
        return Priority.HIGH
    if any(k in text for k in MEDIUM_PRIORITY_KEYWORDS):
        return Priority.MEDIUM
    return Priority.LOW


def known_diagnoses() -> List[str]:
    return [rule.diagnosis for rule in RULES] + [DEFAULT_DIAGNOSIS]


@dataclass(frozen=True)
class Diagnosis:
    symptoms: Tuple[str, ...]
    diagnosis: str
    priority: Priority


def diagnose(reports: Sequence[Any]) -> Optional[Diagnosis]:
    """Normalize, resolve and classify in one step.

    Returns None when no valid symptom name survives normalization.
    """
    names = normalize(reports)
    if not names:
        return None
    text = resolve(names)
    return Diagnosis(symptoms=tuple(names), diagnosis=text, priority=classify(text))


__all__ = [
    "DEFAULT_DIAGNOSIS",
    "Diagnosis",
    "DiagnosisRule",
    "Priority",
    "RULES",
    "classify",
    "diagnose",
    "known_diagnoses",
    "normalize",
    "resolve",
]
