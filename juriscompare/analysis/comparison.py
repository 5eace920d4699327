from __future__ import annotations
import base64
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from juriscompare.analysis.models import AnalysisResult, CLAUSE_CATEGORIES
from juriscompare.analysis.schema import ANALYSIS_SCHEMA
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import AnalysisError, AnalysisFormatError, AnalysisTransportError
from juriscompare.utils.types import Document, ImageDocument, TextDocument

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT_PATH = Path(__file__).resolve().parent.parent / "prompts" / "analysis.txt"

with open(ANALYSIS_PROMPT_PATH, "r", encoding="utf-8") as f:
    ANALYSIS_TEMPLATE = f.read()

FORMAT_ERROR_MESSAGE = "The legal analysis failed to return the expected structured format."


def analysis_instruction() -> str:
    return ANALYSIS_TEMPLATE.format(categories=", ".join(CLAUSE_CATEGORIES))


def document_part(doc: Document, position: int) -> Dict[str, Any]:
    if isinstance(doc, TextDocument):
        return {"text": f"Document {position} Content: {doc.text}"}
    if isinstance(doc, ImageDocument):
        return {"mime_type": doc.mime_type, "data": base64.b64decode(doc.data, validate=True)}
    raise TypeError(f"Unsupported document type: {type(doc).__name__}")


def build_request_parts(doc1: Document, doc2: Document) -> List[Dict[str, Any]]:
    """Both documents in order, then the fixed instruction segment."""
    return [document_part(doc1, 1), document_part(doc2, 2), {"text": analysis_instruction()}]


def parse_analysis(raw: str) -> AnalysisResult:
    if not raw or not raw.strip():
        raise AnalysisFormatError(FORMAT_ERROR_MESSAGE)
    try:
        payload = json.loads(raw)
        return AnalysisResult.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Failed to parse AI response: %s", e)
        raise AnalysisFormatError(FORMAT_ERROR_MESSAGE) from e


class ContractComparer:
    def __init__(self, config: AppConfig, llm=None):
        """Runs one schema-constrained comparison per call.

        ``llm`` is anything with ``generate_json(parts, schema) -> str``; tests
        inject a stub, otherwise a GeminiClient is built lazily on first use so
        a missing key surfaces as a transport failure of that call.
        """
        self.config = config
        self.llm = llm

    def _client(self):
        if self.llm is None:
            from juriscompare.llm.gemini import GeminiClient
            self.llm = GeminiClient(self.config)
        return self.llm

    def analyze(self, doc1: Document, doc2: Document) -> AnalysisResult:
        try:
            parts = build_request_parts(doc1, doc2)
        except (TypeError, ValueError) as e:
            raise AnalysisError(f"Could not prepare documents for analysis: {e}") from e
        try:
            raw = self._client().generate_json(parts, ANALYSIS_SCHEMA)
        except Exception as e:  # external API
            logger.exception("Comparison request failed")
            raise AnalysisTransportError(f"Could not reach the analysis service: {e}") from e
        result = parse_analysis(raw)
        logger.info(
            "Comparison complete: %d risks, %d clauses, %d critical changes",
            len(result.risks), len(result.clause_analysis), len(result.critical_changes),
        )
        return result


def analyze_documents(config: AppConfig, doc1: Document, doc2: Document, llm=None) -> AnalysisResult:
    return ContractComparer(config, llm=llm).analyze(doc1, doc2)
