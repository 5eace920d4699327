from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

JPEG_MIME_TYPE = "image/jpeg"

Role = Literal["user", "model"]


@dataclass(frozen=True)
class TextDocument:
    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class ImageDocument:
    data: str  # base64, no data-URL prefix
    mime_type: str = JPEG_MIME_TYPE

    @property
    def is_empty(self) -> bool:
        return not self.data


# One side of the comparison: exactly one of the two variants.
Document = Union[TextDocument, ImageDocument]


class ComparisonStep(str, Enum):
    UPLOAD = "UPLOAD"
    COMPARING = "COMPARING"
    RESULTS = "RESULTS"


class Slot(str, Enum):
    BASELINE = "baseline"
    COUNTERPARTY = "counterparty"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    text: str

    def as_dict(self):
        return {"role": self.role, "text": self.text}


@dataclass(frozen=True)
class DiffFragment:
    value: str
    added: bool = False
