"""Lightweight health check utilities for JurisCompare.

No network calls: the model service is not contacted. The goal is a fast
readiness signal for CI / demo scripts.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Any, List


@dataclass
class HealthStatus:
    component: str
    ok: bool
    detail: str

    def as_dict(self) -> Dict[str, Any]:
        return {"component": self.component, "ok": self.ok, "detail": self.detail}


def _check_import(module: str) -> HealthStatus:
    try:
        __import__(module)
        return HealthStatus(module, True, "import ok")
    except Exception as e:  # pragma: no cover - diagnostic path
        return HealthStatus(module, False, f"import failed: {e}")


CORE_IMPORTS = [
    "streamlit",
    "google.generativeai",
    "pydantic",
    "pypdf",
    "PIL",
    "dotenv",
]

SAMPLE_ANALYSIS = {
    "summary": "Indemnity widened.",
    "recommendation": "Negotiate.",
    "criticalChanges": ["Gross negligence carve-in"],
    "risks": [{"severity": "high", "category": "Liability", "title": "Indemnity", "description": "d", "impact": "i"}],
    "clauseAnalysis": [],
}


def _check_diff() -> HealthStatus:
    try:
        from juriscompare.diff.word_diff import word_diff
        parts = word_diff("shall indemnify", "shall fully indemnify")
        ok = [p.added for p in parts] == [False, True, False]
        return HealthStatus("word-diff", ok, "diff ok" if ok else f"unexpected fragments: {parts}")
    except Exception as e:  # pragma: no cover - rare path
        return HealthStatus("word-diff", False, f"diff test failed: {e}")


def _check_schema() -> HealthStatus:
    try:
        from juriscompare.analysis.comparison import parse_analysis
        result = parse_analysis(json.dumps(SAMPLE_ANALYSIS))
        return HealthStatus("analysis-schema", True, f"parsed {len(result.risks)} risk(s)")
    except Exception as e:  # pragma: no cover - rare path
        return HealthStatus("analysis-schema", False, f"schema test failed: {e}")


def run_health_check() -> Dict[str, Any]:
    results: List[HealthStatus] = [_check_import(mod) for mod in CORE_IMPORTS]
    results.append(_check_diff())
    results.append(_check_schema())
    return {
        "ok": all(r.ok for r in results),
        "components": [r.as_dict() for r in results],
    }


if __name__ == "__main__":  # Manual invocation helper
    import sys
    report = run_health_check()
    print(json.dumps(report, indent=2))
    sys.exit(0 if report["ok"] else 1)
