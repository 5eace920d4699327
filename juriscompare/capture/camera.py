from __future__ import annotations
import base64
import io
import logging
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError

from juriscompare.utils.errors import CaptureError
from juriscompare.utils.types import ImageDocument, JPEG_MIME_TYPE

logger = logging.getLogger(__name__)

CAMERA_ERROR_MESSAGE = "Could not access camera."


class CameraStream(Protocol):
    def open(self) -> None: ...
    def read_frame(self) -> bytes: ...
    def release(self) -> None: ...


class StreamlitCameraStream:
    """Adapts the value returned by ``st.camera_input`` to ``CameraStream``."""

    def __init__(self, snapshot):
        self._snapshot = snapshot
        self._frame: Optional[bytes] = None

    def open(self) -> None:
        if self._snapshot is None:
            raise CaptureError(CAMERA_ERROR_MESSAGE)
        self._frame = self._snapshot.getvalue()

    def read_frame(self) -> bytes:
        if self._frame is None:
            raise CaptureError("Camera stream is not open.")
        return self._frame

    def release(self) -> None:
        self._frame = None
        self._snapshot = None


def encode_jpeg(frame: bytes, quality: int = 90) -> bytes:
    try:
        with Image.open(io.BytesIO(frame)) as img:
            out = io.BytesIO()
            img.convert("RGB").save(out, format="JPEG", quality=quality)
    except (UnidentifiedImageError, OSError) as e:
        raise CaptureError(f"Captured frame is not a readable image: {e}") from e
    return out.getvalue()


def capture_from_camera(stream: CameraStream) -> ImageDocument:
    """Grab one still frame as a base64 JPEG Document.

    The stream is released on every exit path once acquisition was attempted.
    """
    try:
        try:
            stream.open()
            frame = stream.read_frame()
        except CaptureError:
            raise
        except Exception as e:  # device / permission failures
            raise CaptureError(CAMERA_ERROR_MESSAGE) from e
        jpeg = encode_jpeg(frame)
    finally:
        stream.release()
    logger.info("Captured camera frame (%d bytes JPEG)", len(jpeg))
    return ImageDocument(data=base64.b64encode(jpeg).decode("ascii"), mime_type=JPEG_MIME_TYPE)
