import base64
import json

import pytest

from juriscompare.analysis.comparison import (
    ContractComparer,
    analyze_documents,
    build_request_parts,
    parse_analysis,
)
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import AnalysisError, AnalysisFormatError, AnalysisTransportError
from juriscompare.utils.types import ImageDocument, TextDocument


def sample_payload():
    return {
        "summary": "The revision broadens indemnity.",
        "recommendation": "Push back on clause 9.",
        "criticalChanges": ["Indemnity now covers gross negligence"],
        "risks": [
            {"severity": "medium", "category": "IP", "title": "Licence back", "description": "d", "impact": "i"},
            {"severity": "critical", "category": "Liability", "title": "Uncapped indemnity", "description": "d", "impact": "i"},
        ],
        "clauseAnalysis": [
            {
                "clauseTitle": "Indemnification",
                "category": "Liability",
                "doc1Text": "The Party shall indemnify for negligence.",
                "doc2Text": "The Party shall indemnify for gross negligence.",
                "significance": "Wider exposure.",
            }
        ],
    }


class StubLLM:
    def __init__(self, raw):
        self.raw = raw
        self.calls = []

    def generate_json(self, parts, schema):
        self.calls.append((parts, schema))
        return self.raw


class BrokenLLM:
    def generate_json(self, parts, schema):
        raise ConnectionError("unreachable")


def test_analyze_parses_structured_response():
    llm = StubLLM(json.dumps(sample_payload()))
    result = analyze_documents(AppConfig(), TextDocument("old"), TextDocument("new"), llm=llm)
    assert result.summary.startswith("The revision")
    assert result.clause_analysis[0].doc1_text.endswith("negligence.")
    assert [r.severity for r in result.risks_by_severity()] == ["critical", "medium"]
    assert result.severity_counts() == {"critical": 1, "high": 0, "medium": 1, "low": 0}
    assert len(llm.calls) == 1


def test_missing_risks_is_format_error_not_transport():
    payload = sample_payload()
    del payload["risks"]
    with pytest.raises(AnalysisFormatError):
        analyze_documents(AppConfig(), TextDocument("a"), TextDocument("b"), llm=StubLLM(json.dumps(payload)))


def test_malformed_json_is_format_error():
    with pytest.raises(AnalysisFormatError) as exc:
        parse_analysis("{not json")
    assert "expected structured format" in str(exc.value)


def test_empty_body_is_format_error():
    with pytest.raises(AnalysisFormatError):
        parse_analysis("")


def test_unknown_severity_is_rejected():
    payload = sample_payload()
    payload["risks"][0]["severity"] = "severe"
    with pytest.raises(AnalysisFormatError):
        parse_analysis(json.dumps(payload))


def test_clause_category_is_free_text():
    payload = sample_payload()
    payload["clauseAnalysis"][0]["category"] = "Data Protection"
    assert parse_analysis(json.dumps(payload)).clause_analysis[0].category == "Data Protection"


def test_transport_failure_is_distinct_from_format_failure():
    comparer = ContractComparer(AppConfig(), llm=BrokenLLM())
    with pytest.raises(AnalysisTransportError) as exc:
        comparer.analyze(TextDocument("a"), TextDocument("b"))
    assert not isinstance(exc.value, AnalysisFormatError)
    assert isinstance(exc.value, AnalysisError)


def test_missing_api_key_surfaces_as_transport_error():
    comparer = ContractComparer(AppConfig(api_key=""))
    with pytest.raises(AnalysisTransportError):
        comparer.analyze(TextDocument("a"), TextDocument("b"))


def test_request_parts_order_and_shapes():
    jpeg = base64.b64encode(b"\xff\xd8fake").decode("ascii")
    parts = build_request_parts(TextDocument("baseline terms"), ImageDocument(data=jpeg))
    assert parts[0] == {"text": "Document 1 Content: baseline terms"}
    assert parts[1] == {"mime_type": "image/jpeg", "data": b"\xff\xd8fake"}
    instruction = parts[2]["text"]
    for focus in ("Liability", "Intellectual Property", "Termination", "Risks"):
        assert focus in instruction


class BlockedResponse:
    @property
    def text(self):
        raise ValueError("response was blocked by safety filters")


class BlockedModel:
    def __init__(self, *args, **kwargs):
        pass

    def generate_content(self, parts, generation_config=None):
        return BlockedResponse()


def test_blocked_reply_is_format_error_not_transport(monkeypatch):
    from juriscompare.llm import gemini

    monkeypatch.setattr(gemini.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(gemini.genai, "GenerativeModel", BlockedModel)
    client = gemini.GeminiClient(AppConfig(api_key="test-key"))
    assert client.generate_json([{"text": "x"}], None) == ""
    with pytest.raises(AnalysisFormatError) as exc:
        analyze_documents(AppConfig(api_key="test-key"), TextDocument("a"), TextDocument("b"), llm=client)
    assert not isinstance(exc.value, AnalysisTransportError)


def test_undecodable_image_is_analysis_error_before_any_request():
    llm = StubLLM(json.dumps(sample_payload()))
    comparer = ContractComparer(AppConfig(), llm=llm)
    with pytest.raises(AnalysisError):
        comparer.analyze(TextDocument("a"), ImageDocument(data="not*base64!"))
    assert llm.calls == []
