import asyncio
from types import SimpleNamespace

import cv2
import numpy as np

from idscan.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine


def _png() -> bytes:
    ok, encoded = cv2.imencode(".png", np.full((40, 80, 3), 255, dtype=np.uint8))
    assert ok
    return encoded.tobytes()


class StubPaddle:
    """Stands in for a loaded PaddleOCR instance."""

    def __init__(self, results):
        self.results = results

    def predict(self, img):
        return self.results


def _engine_with(results) -> PaddleOCREngine:
    engine = PaddleOCREngine()
    engine._engine = StubPaddle(results)
    return engine


class TestPaddleOCREngine:

    def test_invalid_image_skips_engine(self):
        engine = PaddleOCREngine()
        result = asyncio.run(engine.recognize(b"not an image"))
        assert result.text == ""
        assert result.details == {"error": "Invalid image"}
        assert engine._engine is None

    def test_lines_sorted_top_to_bottom(self):
        results = [{
            "rec_texts": ["公民身份号码 110101199001011234", "姓名 张三", "性别 男"],
            "rec_scores": [0.9, 0.8, 0.7],
            "rec_polys": [[[10, 90]], [[10, 10]], [[10, 50]]],
        }]
        result = asyncio.run(_engine_with(results).recognize(_png()))
        assert result.text.splitlines() == ["姓名 张三", "性别 男", "公民身份号码 110101199001011234"]
        assert result.confidence == 0.8
        assert result.engine == "paddleocr"
        assert result.details == {"total_lines": 3}

    def test_attribute_style_results(self):
        results = [SimpleNamespace(rec_texts=["住址 北京市"], rec_scores=[0.5], rec_polys=None)]
        result = asyncio.run(_engine_with(results).recognize(_png()))
        assert result.text == "住址 北京市"
        assert result.confidence == 0.5

    def test_no_text_detected(self):
        results = [{"rec_texts": ["  "], "rec_scores": [0.9], "rec_polys": [[[0, 0]]]}]
        result = asyncio.run(_engine_with(results).recognize(_png()))
        assert result.text == ""
        assert result.details == {"warning": "No text detected"}
