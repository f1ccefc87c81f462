import pytest

from idscan.infrastructure.extraction.id_card_extractor import IdCardFieldExtractor

from tests.samples import FakeOCREngine


@pytest.fixture
def extractor():
    return IdCardFieldExtractor()


@pytest.fixture
def fake_ocr():
    return FakeOCREngine()
