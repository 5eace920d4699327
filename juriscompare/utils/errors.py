"""Exception taxonomy.

Every failure of an external collaborator (model service, camera, file
reader) is converted to one of these at the module boundary, so the
workspace can turn it into user-facing state.
"""
from __future__ import annotations


class JurisCompareError(Exception):
    """Base class for all application errors."""


class ConfigError(JurisCompareError):
    pass


class CaptureError(JurisCompareError):
    """Camera permission/device failures and unreadable files."""


class AnalysisError(JurisCompareError):
    """The comparison request did not produce a usable result."""


class AnalysisTransportError(AnalysisError):
    """The model service could not be reached or rejected the call."""


class AnalysisFormatError(AnalysisError):
    """The model responded, but not with the expected structure."""


class ChatError(JurisCompareError):
    """A single counsel turn failed; the session itself stays usable."""
