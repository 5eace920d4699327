"""In-memory workspace for one comparison session.

All UI state lives here and changes only through the transition methods, so
the invariants hold after every call: each slot holds at most one Document,
the transcript is append-only, and the busy indicators are cleared on every
exit path of the operation that set them.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Callable, Optional, Tuple

from juriscompare.analysis.comparison import ContractComparer
from juriscompare.analysis.models import AnalysisResult
from juriscompare.capture.camera import CameraStream, capture_from_camera
from juriscompare.capture.files import capture_from_file
from juriscompare.chat.counsel import CHAT_FALLBACK_MESSAGE, CounselChat, create_counsel_session
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import AnalysisError, CaptureError, ChatError
from juriscompare.utils.types import ChatMessage, ComparisonStep, Document, Slot

logger = logging.getLogger(__name__)

MISSING_DOCUMENTS_MESSAGE = "Documents are missing. Please upload or scan both versions."
ANALYSIS_FAILED_MESSAGE = "Failed to analyze documents."
ANALYZING = "analysis"
TYPING = "chat"

Analyzer = Callable[[Document, Document], AnalysisResult]
ChatFactory = Callable[[AnalysisResult], CounselChat]


class Workspace:
    def __init__(self, config: AppConfig, analyzer: Optional[Analyzer] = None, chat_factory: Optional[ChatFactory] = None):
        self.config = config
        self.analyzer = analyzer or ContractComparer(config).analyze
        self.chat_factory = chat_factory or (lambda result: create_counsel_session(config, result))
        self.step = ComparisonStep.UPLOAD
        self.baseline: Optional[Document] = None
        self.counterparty: Optional[Document] = None
        self.result: Optional[AnalysisResult] = None
        self.transcript: Tuple[ChatMessage, ...] = ()
        self.chat: Optional[CounselChat] = None
        self.error: Optional[str] = None
        self.camera_target: Optional[Slot] = None
        self.pending: Optional[str] = None

    # derived view state
    @property
    def is_analyzing(self) -> bool:
        return self.pending == ANALYZING

    @property
    def is_typing(self) -> bool:
        return self.pending == TYPING

    @property
    def ready_to_analyze(self) -> bool:
        return _present(self.baseline) and _present(self.counterparty) and self.pending is None

    @contextmanager
    def _operation(self, name: str):
        self.pending = name
        try:
            yield
        finally:
            self.pending = None

    # documents
    def document(self, slot: Slot) -> Optional[Document]:
        return self.baseline if slot == Slot.BASELINE else self.counterparty

    def set_document(self, slot: Slot, doc: Optional[Document]) -> None:
        if slot == Slot.BASELINE:
            self.baseline = doc
        else:
            self.counterparty = doc

    def clear_document(self, slot: Slot) -> None:
        self.set_document(slot, None)

    def upload_file(self, slot: Slot, uploaded) -> None:
        try:
            doc = capture_from_file(uploaded)
        except CaptureError as e:
            logger.warning("File capture failed: %s", e)
            self._fail(str(e))
            return
        if doc is not None:
            self.set_document(slot, doc)

    # camera
    def open_camera(self, slot: Slot) -> None:
        self.camera_target = slot

    def close_camera(self) -> None:
        self.camera_target = None

    def capture_photo(self, stream: CameraStream) -> None:
        target = self.camera_target
        try:
            doc = capture_from_camera(stream)
            if target is None:
                raise CaptureError("No document slot selected for capture.")
            self.set_document(target, doc)
        except CaptureError as e:
            logger.warning("Camera capture failed: %s", e)
            self._fail(str(e))
        finally:
            self.camera_target = None

    # analysis
    def start_analysis(self) -> None:
        if not (_present(self.baseline) and _present(self.counterparty)):
            self.error = MISSING_DOCUMENTS_MESSAGE
            return
        if self.pending is not None:
            return
        self.error = None
        self.step = ComparisonStep.COMPARING
        with self._operation(ANALYZING):
            try:
                result = self.analyzer(self.baseline, self.counterparty)
            except AnalysisError as e:
                self._fail(str(e) or ANALYSIS_FAILED_MESSAGE)
                return
            except Exception:
                logger.exception("Unexpected analysis failure")
                self._fail(ANALYSIS_FAILED_MESSAGE)
                return
            self.result = result
            self.transcript = ()
            try:
                self.chat = self.chat_factory(result)
            except ChatError:
                logger.exception("Counsel session unavailable")
                self.chat = None
            self.step = ComparisonStep.RESULTS

    # chat
    def record_user_message(self, text: str) -> None:
        self.transcript = self.transcript + (ChatMessage(role="user", text=text),)

    def record_model_reply(self, text: str) -> None:
        self.transcript = self.transcript + (ChatMessage(role="model", text=text),)

    def send_message(self, text: str) -> bool:
        """Run one counsel turn. Returns False when the message was not accepted."""
        if not text or not text.strip() or self.chat is None or self.pending is not None:
            return False
        self.record_user_message(text)
        with self._operation(TYPING):
            try:
                reply = self.chat.send(text)
            except ChatError:
                logger.exception("Counsel turn failed")
                reply = CHAT_FALLBACK_MESSAGE
            self.record_model_reply(reply)
        return True

    # lifecycle
    def dismiss_error(self) -> None:
        self.error = None

    def reset(self) -> None:
        self.step = ComparisonStep.UPLOAD
        self.baseline = None
        self.counterparty = None
        self.result = None
        self.transcript = ()
        self.chat = None
        self.error = None
        self.camera_target = None

    def _fail(self, message: str) -> None:
        self.error = message
        self.step = ComparisonStep.UPLOAD


def _present(doc: Optional[Document]) -> bool:
    return doc is not None and not doc.is_empty
