"""
Use Case: Extract Identity.

Orchestrates: Fingerprint → Cache → (Enhance) → OCR → Field extraction
→ Cache → Result. Measures the latency of each stage.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from idscan.core.entities.id_number import (
    birth_date_from_id,
    gender_from_id,
    is_structurally_valid,
)
from idscan.core.entities.identity_record import IdentityRecord
from idscan.core.interfaces.field_extractor import IFieldExtractor
from idscan.core.interfaces.image_enhancer import IImageEnhancer
from idscan.core.interfaces.ocr_engine import IOCREngine
from idscan.core.interfaces.record_cache import IRecordCache
from idscan.core.interfaces.rules_engine import IRulesEngine, RulesResult

logger = logging.getLogger(__name__)


@dataclass
class ProcessOptions:
    """Per-call options for ExtractIdentityUseCase.process."""
    use_cache: bool = True
    enhance: bool = True
    id_number_hint: str | None = None   # trusted id number, overrides the OCR one


class ExtractIdentityUseCase:
    """
    Use Case: image → identity record.

    Dependency Injection: every collaborator comes in through the
    constructor. Optional ones (cache, enhancer, rules engine) may be
    None; without a cache every call runs recognition.

    Fingerprinting and enhancement are CPU-bound and run in worker
    threads, like recognition, so the event loop stays free.

    Two concurrent calls for the same image both miss the cache and
    both run recognition; there is no in-flight deduplication.
    """

    def __init__(
        self,
        ocr_engine: IOCREngine,
        field_extractor: IFieldExtractor,
        fingerprint: Callable[[bytes], str],
        cache: IRecordCache | None = None,
        image_enhancer: IImageEnhancer | None = None,
        rules_engine: IRulesEngine | None = None,
    ):
        self._ocr = ocr_engine
        self._extractor = field_extractor
        self._fingerprint = fingerprint
        self._cache = cache
        self._enhancer = image_enhancer
        self._rules = rules_engine

    async def process(
        self, image_bytes: bytes, options: ProcessOptions | None = None
    ) -> IdentityRecord:
        """
        Run the pipeline for one image.

        1. Fingerprint the image
        2. Cache lookup (a hit returns without recognition)
        3. Enhance (optional)
        4. OCR
        5. Field extraction
        6. Cache store

        Never raises for recognition failures: the caller gets an
        empty record instead.
        """
        opts = options or ProcessOptions()
        stage_latencies: dict[str, float] = {}
        t_start = time.perf_counter()

        # ── 1. Fingerprint ─────────────────────────────────
        t0 = time.perf_counter()
        fingerprint = await asyncio.to_thread(self._fingerprint, image_bytes)
        stage_latencies["fingerprint_ms"] = round((time.perf_counter() - t0) * 1000, 2)

        use_cache = self._cache is not None and opts.use_cache

        # ── 2. Cache ───────────────────────────────────────
        if use_cache:
            cached = self._cache.get(fingerprint)
            if cached is not None:
                logger.info(f"Using cached record for {fingerprint[:16]}")
                return self._apply_hint(cached, opts.id_number_hint)

        # ── 3. Enhance ─────────────────────────────────────
        ocr_input = image_bytes
        if opts.enhance and self._enhancer is not None:
            t0 = time.perf_counter()
            try:
                ocr_input = await asyncio.to_thread(self._enhancer.enhance, image_bytes)
            except Exception as e:
                logger.warning(f"Image enhancement failed, using original: {e}")
            stage_latencies["enhance_ms"] = round((time.perf_counter() - t0) * 1000, 2)

        # ── 4. OCR ─────────────────────────────────────────
        t0 = time.perf_counter()
        try:
            recognition = await self._ocr.recognize(ocr_input)
        except Exception:
            logger.exception(f"Recognition failed for {fingerprint[:16]}")
            return IdentityRecord.empty()
        stage_latencies["ocr_ms"] = round((time.perf_counter() - t0) * 1000, 2)

        # ── 5. Field extraction ────────────────────────────
        t0 = time.perf_counter()
        record = self._extractor.extract(recognition.text)
        if recognition.confidence is not None:
            record = replace(record, confidence=recognition.confidence)
        stage_latencies["extract_ms"] = round((time.perf_counter() - t0) * 1000, 2)

        # ── 6. Cache ───────────────────────────────────────
        if use_cache:
            self._cache.set(fingerprint, record)

        total_ms = round((time.perf_counter() - t_start) * 1000, 2)
        logger.debug(f"Processed {fingerprint[:16]} in {total_ms}ms {stage_latencies}")

        return self._apply_hint(record, opts.id_number_hint)

    def validate(self, record: IdentityRecord) -> RulesResult | None:
        """Rules result for a record, or None without a rules engine."""
        if self._rules is None:
            return None
        return self._rules.apply(record)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    @staticmethod
    def is_structurally_valid(id_number: str) -> bool:
        return is_structurally_valid(id_number)

    @staticmethod
    def _apply_hint(record: IdentityRecord, id_number_hint: str | None) -> IdentityRecord:
        """
        Override the id number with a trusted one and re-derive
        birth date and gender from it. Invalid hints are ignored.
        """
        if not id_number_hint or not is_structurally_valid(id_number_hint):
            return record
        return replace(
            record,
            id_number=id_number_hint,
            birth_date=birth_date_from_id(id_number_hint),
            gender=gender_from_id(id_number_hint),
        )
