"""
Run the extraction pipeline on card images and print the records.

Usage:
    python scripts/extract_single.py front.jpg back.jpg
    python scripts/extract_single.py --text ocr_dump.txt
"""
import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from idscan.config.settings import get_settings
from idscan.core.use_cases.extract_identity import ExtractIdentityUseCase, ProcessOptions
from idscan.infrastructure.cache.lru_record_cache import LRURecordCache
from idscan.infrastructure.extraction.id_card_extractor import IdCardFieldExtractor
from idscan.infrastructure.imaging.fingerprint import image_fingerprint
from idscan.infrastructure.imaging.opencv_enhancer import OpenCVImageEnhancer
from idscan.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine
from idscan.infrastructure.rules.id_card_rules import IdCardRulesEngine


def print_report(label: str, record, rules) -> None:
    print(f"\n[{label}]")
    print(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
    print(f"  Risk: {rules.risk_level} ({rules.risk_score})")
    print(f"  Rules: {rules.rules_passed}/{rules.rules_total} passed")
    for v in rules.violations:
        print(f"    [{v.severity:8s}] {v.rule_id}: {v.detail[:80]}")


async def run_images(paths: list[str], enhance: bool) -> None:
    settings = get_settings()
    rules_engine = IdCardRulesEngine(strict_checksum=settings.id_checksum_strict)
    use_case = ExtractIdentityUseCase(
        ocr_engine=PaddleOCREngine(lang=settings.ocr_lang, use_gpu=settings.ocr_use_gpu),
        field_extractor=IdCardFieldExtractor(),
        fingerprint=image_fingerprint,
        cache=LRURecordCache(capacity=settings.cache_size),
        image_enhancer=OpenCVImageEnhancer(
            max_dimension=settings.max_image_dimension,
            brightness=settings.enhance_brightness,
            contrast=settings.enhance_contrast,
            sharpen=settings.enhance_sharpen,
        ),
        rules_engine=rules_engine,
    )

    for path in paths:
        image_bytes = Path(path).read_bytes()
        t0 = time.perf_counter()
        record = await use_case.process(image_bytes, ProcessOptions(enhance=enhance))
        elapsed = (time.perf_counter() - t0) * 1000
        print_report(f"{path} ({elapsed:.0f}ms)", record, rules_engine.apply(record))


def run_text(path: str) -> None:
    settings = get_settings()
    raw_text = Path(path).read_text(encoding="utf-8")
    record = IdCardFieldExtractor().extract(raw_text)
    rules = IdCardRulesEngine(strict_checksum=settings.id_checksum_strict).apply(record)
    print_report(path, record, rules)


def main():
    parser = argparse.ArgumentParser(description="Extract identity card fields")
    parser.add_argument("images", nargs="*", help="Card images (JPEG/PNG)")
    parser.add_argument("--text", help="Parse an OCR text dump instead of images")
    parser.add_argument("--no-enhance", action="store_true", help="Skip pre-enhancement")
    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    if args.text:
        run_text(args.text)
    elif args.images:
        asyncio.run(run_images(args.images, enhance=not args.no_enhance))
    else:
        parser.error("give at least one image or --text")


if __name__ == "__main__":
    main()
