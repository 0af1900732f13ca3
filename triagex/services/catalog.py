"""Fixed symptom catalog offered to the triage form."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

CATALOG_PATH = Path(__file__).resolve().parents[1] / "resources" / "symptom_catalog.json"


@lru_cache(maxsize=1)
def load_catalog() -> List[Dict[str, Any]]:
    data = json.loads(CATALOG_PATH.read_text(encoding="utf-8"))
    return list(data.get("symptoms", []))


__all__ = ["load_catalog", "CATALOG_PATH"]
