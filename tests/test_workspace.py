import io

from PIL import Image

from juriscompare.analysis.models import AnalysisResult
from juriscompare.chat.counsel import CHAT_FALLBACK_MESSAGE, CounselChat
from juriscompare.analysis.comparison import ContractComparer
from juriscompare.session.workspace import ANALYSIS_FAILED_MESSAGE, MISSING_DOCUMENTS_MESSAGE, Workspace
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import AnalysisFormatError, AnalysisTransportError, ChatError
from juriscompare.utils.types import ComparisonStep, ImageDocument, Slot, TextDocument

RESULT = AnalysisResult.model_validate({
    "summary": "s",
    "recommendation": "r",
    "criticalChanges": ["c"],
    "risks": [{"severity": "low", "category": "General", "title": "t", "description": "d", "impact": "i"}],
    "clauseAnalysis": [],
})


class FlakySession:
    """Fails on the first send, answers afterwards."""

    def __init__(self, observed):
        self.calls = 0
        self.observed = observed

    def send(self, message):
        self.observed.append(self.workspace.is_typing)
        self.calls += 1
        if self.calls == 1:
            raise ConnectionError("offline")
        return "answer"


def make_workspace(analyzer=None, session=None):
    session = session or FlakySession([])
    ws = Workspace(
        AppConfig(),
        analyzer=analyzer or (lambda a, b: RESULT),
        chat_factory=lambda result: CounselChat(session, "seed"),
    )
    session.workspace = ws
    return ws


def filled(ws):
    ws.set_document(Slot.BASELINE, TextDocument("old terms"))
    ws.set_document(Slot.COUNTERPARTY, TextDocument("new terms"))
    return ws


def test_start_analysis_requires_both_documents():
    ws = make_workspace()
    ws.set_document(Slot.BASELINE, TextDocument("only one"))
    ws.start_analysis()
    assert ws.error == MISSING_DOCUMENTS_MESSAGE
    assert ws.step == ComparisonStep.UPLOAD
    assert ws.result is None


def test_blank_text_counts_as_missing():
    ws = make_workspace()
    ws.set_document(Slot.BASELINE, TextDocument("  "))
    ws.set_document(Slot.COUNTERPARTY, TextDocument("x"))
    assert not ws.ready_to_analyze


def test_successful_analysis_moves_to_results_with_chat():
    seen = []

    def analyzer(a, b):
        seen.append(ws.is_analyzing)
        return RESULT

    ws = filled(make_workspace(analyzer=analyzer))
    ws.start_analysis()
    assert seen == [True]
    assert ws.step == ComparisonStep.RESULTS
    assert ws.result is RESULT
    assert ws.chat is not None
    assert not ws.is_analyzing


def test_analysis_failure_returns_to_upload_and_keeps_documents():
    for exc in (AnalysisTransportError("down"), AnalysisFormatError("bad json")):
        def analyzer(a, b, exc=exc):
            raise exc

        ws = filled(make_workspace(analyzer=analyzer))
        ws.start_analysis()
        assert ws.step == ComparisonStep.UPLOAD
        assert ws.error == str(exc)
        assert ws.baseline == TextDocument("old terms")
        assert ws.counterparty == TextDocument("new terms")
        assert not ws.is_analyzing


def test_chat_failure_appends_one_fallback_and_stays_usable():
    observed = []
    session = FlakySession(observed)
    ws = filled(make_workspace(session=session))
    ws.start_analysis()

    assert ws.send_message("first?") is True
    assert [m.role for m in ws.transcript] == ["user", "model"]
    assert ws.transcript[-1].text == CHAT_FALLBACK_MESSAGE
    assert not ws.is_typing

    assert ws.send_message("second?") is True
    assert ws.transcript[-1].text == "answer"
    assert len(ws.transcript) == 4
    assert observed == [True, True]


def test_send_message_ignores_blank_and_missing_chat():
    ws = make_workspace()
    assert ws.send_message("hello") is False
    ws = filled(make_workspace())
    ws.start_analysis()
    assert ws.send_message("   ") is False
    assert ws.transcript == ()


def test_chat_factory_failure_still_shows_results():
    def factory(result):
        raise ChatError("no key")

    ws = filled(Workspace(AppConfig(), analyzer=lambda a, b: RESULT, chat_factory=factory))
    ws.start_analysis()
    assert ws.step == ComparisonStep.RESULTS
    assert ws.chat is None
    assert ws.send_message("hi") is False


def test_transcript_is_append_only():
    ws = make_workspace()
    ws.record_user_message("q")
    before = ws.transcript
    ws.record_model_reply("a")
    assert before == (ws.transcript[0],)
    assert len(ws.transcript) == 2


def test_reset_clears_everything_together():
    ws = filled(make_workspace())
    ws.start_analysis()
    ws.record_user_message("q")
    ws.reset()
    assert ws.step == ComparisonStep.UPLOAD
    assert ws.baseline is None and ws.counterparty is None
    assert ws.result is None and ws.chat is None
    assert ws.transcript == ()


class DeniedStream:
    def __init__(self):
        self.released = False

    def open(self):
        raise PermissionError("denied")

    def read_frame(self):
        raise AssertionError("must not read after failed open")

    def release(self):
        self.released = True


def test_camera_failure_clears_camera_state():
    ws = make_workspace()
    ws.set_document(Slot.COUNTERPARTY, TextDocument("typed"))
    ws.open_camera(Slot.COUNTERPARTY)
    stream = DeniedStream()
    ws.capture_photo(stream)
    assert stream.released
    assert ws.camera_target is None
    assert ws.error == "Could not access camera."
    assert ws.counterparty == TextDocument("typed")


class PhotoStream:
    def __init__(self):
        self.released = False

    def open(self):
        pass

    def read_frame(self):
        buf = io.BytesIO()
        Image.new("RGB", (4, 4)).save(buf, format="PNG")
        return buf.getvalue()

    def release(self):
        self.released = True


def test_retake_replaces_document_variant():
    ws = make_workspace()
    ws.set_document(Slot.BASELINE, TextDocument("typed"))
    ws.open_camera(Slot.BASELINE)
    ws.capture_photo(PhotoStream())
    assert isinstance(ws.baseline, ImageDocument)
    assert ws.camera_target is None
    ws.set_document(Slot.BASELINE, TextDocument("retyped"))
    assert ws.baseline == TextDocument("retyped")


class FakeUpload(io.BytesIO):
    name = "v2.txt"


def test_upload_file_sets_slot_and_none_is_noop():
    ws = make_workspace()
    ws.upload_file(Slot.COUNTERPARTY, None)
    assert ws.counterparty is None
    ws.upload_file(Slot.COUNTERPARTY, FakeUpload(b"Term: 2 years"))
    assert ws.counterparty == TextDocument("Term: 2 years")


def test_upload_failure_sets_error():
    ws = make_workspace()
    ws.upload_file(Slot.BASELINE, FakeUpload(b""))
    assert ws.error
    ws.dismiss_error()
    assert ws.error is None


def test_capture_without_target_still_releases_camera():
    ws = make_workspace()
    stream = PhotoStream()
    ws.capture_photo(stream)
    assert stream.released
    assert ws.error
    assert ws.camera_target is None
    assert ws.baseline is None and ws.counterparty is None


def test_unexpected_analyzer_error_returns_to_upload():
    def explode(a, b):
        raise RuntimeError("boom")

    ws = filled(make_workspace(analyzer=explode))
    ws.start_analysis()
    assert ws.step == ComparisonStep.UPLOAD
    assert ws.error == ANALYSIS_FAILED_MESSAGE
    assert not ws.is_analyzing
    assert ws.baseline == TextDocument("old terms")


class UnusedLLM:
    def generate_json(self, parts, schema):
        raise AssertionError("request must not be sent")


def test_undecodable_scan_fails_analysis_cleanly():
    comparer = ContractComparer(AppConfig(), llm=UnusedLLM())
    ws = make_workspace(analyzer=comparer.analyze)
    ws.set_document(Slot.BASELINE, TextDocument("old terms"))
    ws.set_document(Slot.COUNTERPARTY, ImageDocument(data="not*base64!"))
    ws.start_analysis()
    assert ws.step == ComparisonStep.UPLOAD
    assert ws.error
    assert not ws.is_analyzing
    assert ws.result is None
