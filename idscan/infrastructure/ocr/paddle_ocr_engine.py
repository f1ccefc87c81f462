"""
Adapter: PaddleOCR Engine.

Recognizes card text with PaddleOCR (Chinese model). Returns raw
text only, one recognized line per row, top to bottom; field parsing
happens in the extractor.

PaddleOCR is blocking and heavy, so inference runs in a worker
thread and the engine is created lazily on first use.
"""

import asyncio
import logging
import threading
from typing import Any

import cv2
import numpy as np

from idscan.core.interfaces.ocr_engine import IOCREngine, RecognitionResult

logger = logging.getLogger(__name__)


class PaddleOCREngine(IOCREngine):
    """
    OCR using PaddleOCR.

    Pipeline:
        1. Decode bytes with OpenCV
        2. PaddleOCR predict() → texts + scores + polygons
        3. Lines sorted by vertical position, joined with newlines
    """

    ENGINE_NAME = "paddleocr"

    def __init__(self, lang: str = "ch", use_gpu: bool = False):
        self._lang = lang
        self._use_gpu = use_gpu
        self._engine = None  # Lazy init (PaddleOCR is heavy)
        self._init_lock = threading.Lock()

    def _get_engine(self) -> Any:
        """Create PaddleOCR on demand, once."""
        with self._init_lock:
            if self._engine is None:
                from paddleocr import PaddleOCR

                self._engine = PaddleOCR(
                    lang=self._lang,
                    device="gpu" if self._use_gpu else "cpu",
                    use_doc_orientation_classify=False,
                    use_doc_unwarping=False,
                    use_textline_orientation=True,
                )
                logger.info(f"PaddleOCR initialized (lang={self._lang}, gpu={self._use_gpu})")
        return self._engine

    async def recognize(self, image_bytes: bytes) -> RecognitionResult:
        return await asyncio.to_thread(self._recognize_sync, image_bytes)

    def _recognize_sync(self, image_bytes: bytes) -> RecognitionResult:
        img_array = np.frombuffer(image_bytes, dtype=np.uint8)
        img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None

        if img is None:
            return RecognitionResult(
                text="",
                confidence=0.0,
                engine=self.ENGINE_NAME,
                details={"error": "Invalid image"},
            )

        engine = self._get_engine()
        results = engine.predict(img)

        lines = self._collect_lines(results)
        if not lines:
            return RecognitionResult(
                text="",
                confidence=0.0,
                engine=self.ENGINE_NAME,
                details={"warning": "No text detected"},
            )

        lines.sort(key=lambda line: (line["y"], line["x"]))
        avg_conf = sum(line["confidence"] for line in lines) / len(lines)

        return RecognitionResult(
            text="\n".join(line["text"] for line in lines),
            confidence=round(avg_conf, 3),
            engine=self.ENGINE_NAME,
            details={"total_lines": len(lines)},
        )

    @staticmethod
    def _collect_lines(results: Any) -> list[dict]:
        """Flatten predict() output into {text, confidence, x, y} rows."""
        lines: list[dict] = []
        for res in results or []:
            texts = res.get("rec_texts") if isinstance(res, dict) else getattr(res, "rec_texts", None)
            scores = res.get("rec_scores") if isinstance(res, dict) else getattr(res, "rec_scores", None)
            polys = res.get("rec_polys") if isinstance(res, dict) else getattr(res, "rec_polys", None)
            if not texts:
                continue
            if scores is None:
                scores = [0.0] * len(texts)
            if polys is None:
                polys = [None] * len(texts)

            for text, score, poly in zip(texts, scores, polys):
                if not text or not text.strip():
                    continue
                x, y = (float(poly[0][0]), float(poly[0][1])) if poly is not None and len(poly) > 0 else (0.0, 0.0)
                lines.append({
                    "text": text.strip(),
                    "confidence": float(score),
                    "x": x,
                    "y": y,
                })
        return lines
