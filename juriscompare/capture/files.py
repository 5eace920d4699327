from __future__ import annotations
import io
import logging
import re
from typing import Optional

from pypdf import PdfReader

from juriscompare.utils.errors import CaptureError
from juriscompare.utils.types import TextDocument

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"
BLANK_RUN_RE = re.compile(r"[ \t\x0b\x0c\r]+")


def clean_text(text: str) -> str:
    text = text.replace("\x00", " ")
    # collapse horizontal whitespace but keep line structure for clause layout
    lines = [BLANK_RUN_RE.sub(" ", line).strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def extract_pdf_text(data: bytes) -> str:
    pages_text = []
    try:
        reader = PdfReader(io.BytesIO(data))
        for page in reader.pages:
            pages_text.append(clean_text(page.extract_text() or ""))
    except Exception as e:  # damaged or encrypted file
        raise CaptureError(f"Could not read PDF: {e}") from e
    return "\n\n".join(p for p in pages_text if p)


def decode_text(data: bytes) -> str:
    """UTF-8 with replacement; other binary formats come through as raw text."""
    return data.decode("utf-8-sig", errors="replace")


def capture_from_file(uploaded) -> Optional[TextDocument]:
    """Read an uploaded file into a text Document.

    ``uploaded`` is a Streamlit UploadedFile (or any object with ``read()``
    and ``name``). No selection is a no-op and returns None.
    """
    if uploaded is None:
        return None
    name = getattr(uploaded, "name", "upload")
    try:
        data = uploaded.read()
    except OSError as e:
        raise CaptureError(f"Could not read {name}: {e}") from e
    if data.startswith(PDF_SIGNATURE):
        text = extract_pdf_text(data)
    else:
        text = clean_text(decode_text(data))
    if not text.strip():
        raise CaptureError("The selected file contains no readable text.")
    logger.info("Captured %s (%d chars)", name, len(text))
    return TextDocument(text=text)
