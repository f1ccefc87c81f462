"""Sample card texts and fake collaborators shared by the tests."""

import time

from idscan.core.interfaces.image_enhancer import IImageEnhancer
from idscan.core.interfaces.ocr_engine import IOCREngine, RecognitionResult


# Checksum-valid example number (female, born 1949-12-31)
VALID_ID = "11010519491231002X"
# Structurally valid, wrong check digit (male, born 1990-01-01)
SAMPLE_ID = "110101199001011234"

SAMPLE_TEXT = (
    "姓名 张三 性别 男 民族 汉族 出生 1990年1月1日 "
    "住址 北京市朝阳区某街1号 公民身份号码 110101199001011234"
)

FRONT_TEXT = """姓名 李娜
性别 女 民族 汉族
出生 1949年12月31日
住址 北京市西城区
金融大街 8号院
公民身份号码 11010519491231002X
"""

BACK_TEXT = """中华人民共和国
居民身份证
签发机关 北京市公安局西城分局
有效期限 2015.01.01-2035.01.01
"""


class FakeOCREngine(IOCREngine):
    """Returns fixed text and counts calls."""

    def __init__(self, text: str = SAMPLE_TEXT, confidence: float | None = 0.91):
        self.text = text
        self.confidence = confidence
        self.calls = 0
        self.inputs: list[bytes] = []

    async def recognize(self, image_bytes: bytes) -> RecognitionResult:
        self.calls += 1
        self.inputs.append(image_bytes)
        return RecognitionResult(text=self.text, confidence=self.confidence, engine="fake")


class FailingOCREngine(IOCREngine):
    def __init__(self):
        self.calls = 0

    async def recognize(self, image_bytes: bytes) -> RecognitionResult:
        self.calls += 1
        raise RuntimeError("engine crashed")


class PrefixEnhancer(IImageEnhancer):
    def enhance(self, image_bytes: bytes) -> bytes:
        return b"enhanced:" + image_bytes


class BrokenEnhancer(IImageEnhancer):
    def enhance(self, image_bytes: bytes) -> bytes:
        raise ValueError("Could not decode image")


def bytes_fingerprint(image_bytes: bytes) -> str:
    return image_bytes.hex()


class SlowEnhancer(IImageEnhancer):
    """Blocks its thread for a fixed time, like a large OpenCV pass."""

    def __init__(self, delay: float = 0.3):
        self.delay = delay

    def enhance(self, image_bytes: bytes) -> bytes:
        time.sleep(self.delay)
        return image_bytes
