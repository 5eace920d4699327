"""Validated shape of the structured comparison returned by the model.

Field names follow the JSON wire format (camelCase aliases); Python code uses
the snake_case attribute names.
"""
from __future__ import annotations
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_ORDER: List[str] = ["critical", "high", "medium", "low"]

# Documented categories; the model is asked for these but they are not enforced.
CLAUSE_CATEGORIES = [
    "Liability",
    "Intellectual Property",
    "Termination",
    "Payment",
    "General",
    "Confidentiality",
]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Risk(_Record):
    severity: Severity
    category: str
    title: str
    description: str
    impact: str


class ClauseComparison(_Record):
    clause_title: str = Field(alias="clauseTitle")
    category: str
    doc1_text: str = Field(alias="doc1Text")
    doc2_text: str = Field(alias="doc2Text")
    significance: str


class AnalysisResult(_Record):
    summary: str
    recommendation: str
    critical_changes: List[str] = Field(alias="criticalChanges")
    risks: List[Risk]
    clause_analysis: List[ClauseComparison] = Field(alias="clauseAnalysis")

    def severity_counts(self) -> Dict[str, int]:
        counts = {s: 0 for s in SEVERITY_ORDER}
        for r in self.risks:
            counts[r.severity] += 1
        return counts

    def risks_by_severity(self) -> List[Risk]:
        return sorted(self.risks, key=lambda r: SEVERITY_ORDER.index(r.severity))

    def to_wire(self) -> Dict:
        return self.model_dump(by_alias=True)
