"""Response schema sent with the comparison request.

Mirrors ``AnalysisResult``; severity is enum-constrained, clause category is
free text.
"""
from __future__ import annotations
from google.generativeai import protos

from juriscompare.analysis.models import SEVERITY_ORDER

_STRING = protos.Schema(type_=protos.Type.STRING)


def _object(properties, required=None):
    return protos.Schema(
        type_=protos.Type.OBJECT,
        properties=properties,
        required=list(required if required is not None else properties),
    )


def _array(items):
    return protos.Schema(type_=protos.Type.ARRAY, items=items)


RISK_SCHEMA = _object({
    "severity": protos.Schema(type_=protos.Type.STRING, format_="enum", enum=list(reversed(SEVERITY_ORDER))),
    "category": _STRING,
    "title": _STRING,
    "description": _STRING,
    "impact": _STRING,
})

CLAUSE_SCHEMA = _object({
    "clauseTitle": _STRING,
    "category": _STRING,
    "doc1Text": _STRING,
    "doc2Text": _STRING,
    "significance": _STRING,
})

ANALYSIS_SCHEMA = _object({
    "summary": _STRING,
    "recommendation": _STRING,
    "criticalChanges": _array(_STRING),
    "risks": _array(RISK_SCHEMA),
    "clauseAnalysis": _array(CLAUSE_SCHEMA),
})
