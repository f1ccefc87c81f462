"""
Contract: OCR Engine

Turns a card image into raw recognized text.
Any engine (PaddleOCR, Tesseract, external API) must implement
this contract. Field parsing is NOT the engine's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class RecognitionResult:
    """Raw output of a recognition call."""
    text: str                          # full recognized text, one line per box
    confidence: float | None = None    # average confidence, if the engine reports one
    engine: str = ""                   # engine identification
    details: dict = field(default_factory=dict)


class IOCREngine(ABC):
    """
    Port: OCR Engine

    May block or suspend for a long time; callers await it.
    Implementations are free to raise: the use case treats any
    exception as "no text produced".
    """

    @abstractmethod
    async def recognize(self, image_bytes: bytes) -> RecognitionResult:
        """
        Recognize text in an image.

        Args:
            image_bytes: Image in bytes (JPEG/PNG).

        Returns:
            RecognitionResult with the raw text.
        """
        ...
