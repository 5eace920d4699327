from __future__ import annotations
import json
from typing import Any, Dict, Optional, Sequence
from juriscompare.analysis.models import AnalysisResult
from juriscompare.utils.types import ChatMessage, Document, ImageDocument

def describe_document(doc: Optional[Document]) -> Dict[str, Any]:
    if doc is None:
        return {"kind": "missing"}
    if isinstance(doc, ImageDocument):
        return {"kind": "image", "mime_type": doc.mime_type, "base64_chars": len(doc.data)}
    return {"kind": "text", "chars": len(doc.text), "words": len(doc.text.split())}


def build_analysis_json(
    result: AnalysisResult,
    transcript: Sequence[ChatMessage],
    meta: Dict[str, Any],
    baseline: Optional[Document] = None,
    counterparty: Optional[Document] = None,
) -> str:
    """Return a JSON snapshot of the comparison and the counsel transcript.

    Document contents are not embedded, only their shape; the analysis keeps
    the model's camelCase keys so the file matches the wire format.
    """
    payload = {
        "meta": meta,
        "documents": {
            "baseline": describe_document(baseline),
            "counterparty": describe_document(counterparty),
        },
        "severity_counts": result.severity_counts(),
        "analysis": result.to_wire(),
        "transcript": [m.as_dict() for m in transcript],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)
