from __future__ import annotations
import logging
from pathlib import Path

from juriscompare.analysis.models import AnalysisResult
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import ChatError

logger = logging.getLogger(__name__)

COUNSEL_PROMPT_PATH = Path(__file__).resolve().parent.parent / "prompts" / "counsel.txt"

with open(COUNSEL_PROMPT_PATH, "r", encoding="utf-8") as f:
    COUNSEL_TEMPLATE = f.read()

CHAT_FALLBACK_MESSAGE = "Error: Could not reach the AI counsel."


def counsel_instruction(context: AnalysisResult) -> str:
    return COUNSEL_TEMPLATE.format(
        summary=context.summary,
        risk_titles=", ".join(r.title for r in context.risks),
    )


class CounselChat:
    """Stateful follow-up conversation seeded with one analysis.

    Turns are kept by the remote session; ``send`` must not be called
    concurrently on the same handle.
    """

    def __init__(self, session, system_instruction: str):
        self._session = session
        self.system_instruction = system_instruction
        self.turns = 0

    def send(self, message: str) -> str:
        if not message or not message.strip():
            raise ValueError("message must not be blank")
        try:
            reply = self._session.send(message)
        except Exception as e:  # external API
            raise ChatError(f"Counsel turn failed: {e}") from e
        if not reply:
            raise ChatError("Counsel returned an empty reply")
        self.turns += 1
        return reply


def create_counsel_session(config: AppConfig, context: AnalysisResult, llm=None) -> CounselChat:
    """``llm`` is anything with ``start_chat(system_instruction)``; defaults to GeminiClient."""
    instruction = counsel_instruction(context)
    try:
        if llm is None:
            from juriscompare.llm.gemini import GeminiClient
            llm = GeminiClient(config)
        session = llm.start_chat(instruction)
    except Exception as e:
        raise ChatError(f"Could not start counsel session: {e}") from e
    logger.debug("Counsel session seeded with %d risk titles", len(context.risks))
    return CounselChat(session, instruction)
