"""
Routes: card extraction, id number validation and cache control.
"""

import time

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from idscan.api.schemas.responses import (
    CacheStatsResponse,
    ExtractionResponse,
    IdentityRecordResponse,
    RuleViolationResponse,
    RulesResponse,
    ValidateRequest,
    ValidationResponse,
)
from idscan.config.settings import get_settings
from idscan.core.entities.id_number import (
    birth_date_from_id,
    gender_from_id,
    has_valid_checksum,
    is_structurally_valid,
    region_code_from_id,
)
from idscan.core.use_cases.extract_identity import ExtractIdentityUseCase, ProcessOptions
from idscan.infrastructure.cache.lru_record_cache import LRURecordCache
from idscan.infrastructure.extraction.id_card_extractor import IdCardFieldExtractor
from idscan.infrastructure.imaging.fingerprint import image_fingerprint
from idscan.infrastructure.imaging.opencv_enhancer import OpenCVImageEnhancer
from idscan.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine
from idscan.infrastructure.rules.id_card_rules import IdCardRulesEngine

router = APIRouter()

# Lazy singletons
_use_case = None
_cache = None


def get_cache() -> LRURecordCache | None:
    """Shared result cache, or None when caching is disabled."""
    global _cache
    settings = get_settings()
    if not settings.cache_enabled:
        return None
    if _cache is None:
        _cache = LRURecordCache(capacity=settings.cache_size)
    return _cache


def get_use_case() -> ExtractIdentityUseCase:
    """Factory: build the use case with concrete adapters."""
    global _use_case
    if _use_case is None:
        settings = get_settings()
        _use_case = ExtractIdentityUseCase(
            ocr_engine=PaddleOCREngine(
                lang=settings.ocr_lang,
                use_gpu=settings.ocr_use_gpu,
            ),
            field_extractor=IdCardFieldExtractor(),
            fingerprint=image_fingerprint,
            cache=get_cache(),
            image_enhancer=OpenCVImageEnhancer(
                max_dimension=settings.max_image_dimension,
                brightness=settings.enhance_brightness,
                contrast=settings.enhance_contrast,
                sharpen=settings.enhance_sharpen,
            ),
            rules_engine=IdCardRulesEngine(strict_checksum=settings.id_checksum_strict),
        )
    return _use_case


@router.post("/extract", response_model=ExtractionResponse)
async def extract_identity(
    file: UploadFile = File(...),
    use_cache: bool = True,
    enhance: bool = True,
    id_number_hint: str | None = None,
    use_case: ExtractIdentityUseCase = Depends(get_use_case),
):
    """
    Extract identity card fields from an image.

    Upload an image (JPEG/PNG) and receive:
    - The extracted record (absent fields are null)
    - Rules result (id number structure, cross-checks)
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image (JPEG/PNG)")

    image_bytes = await file.read()
    if len(image_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file")

    t0 = time.perf_counter()
    record = await use_case.process(
        image_bytes,
        ProcessOptions(use_cache=use_cache, enhance=enhance, id_number_hint=id_number_hint),
    )
    rules = use_case.validate(record)
    latency_ms = round((time.perf_counter() - t0) * 1000, 2)

    response = ExtractionResponse(
        record=IdentityRecordResponse(**record.to_dict()),
        is_empty=record.is_empty(),
        total_latency_ms=latency_ms,
    )

    if rules:
        response.rules = RulesResponse(
            rules_passed=rules.rules_passed,
            rules_failed=rules.rules_failed,
            rules_total=rules.rules_total,
            violations=[
                RuleViolationResponse(
                    rule_id=v.rule_id,
                    rule_name=v.rule_name,
                    severity=v.severity,
                    detail=v.detail,
                )
                for v in rules.violations
            ],
            risk_score=rules.risk_score,
            risk_level=rules.risk_level,
            rules_version=rules.rules_version,
        )

    return response


@router.post("/validate", response_model=ValidationResponse)
async def validate_id_number(req: ValidateRequest):
    """Structural check of an id number, without any image."""
    id_number = req.id_number.strip().upper()
    return ValidationResponse(
        id_number=id_number,
        valid=is_structurally_valid(id_number),
        checksum_ok=has_valid_checksum(id_number),
        birth_date=birth_date_from_id(id_number),
        gender=gender_from_id(id_number),
        region_code=region_code_from_id(id_number),
    )


@router.delete("/cache")
async def clear_cache(use_case: ExtractIdentityUseCase = Depends(get_use_case)):
    use_case.clear_cache()
    return {"cleared": True}


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(cache: LRURecordCache | None = Depends(get_cache)):
    if cache is None:
        raise HTTPException(status_code=404, detail="Cache disabled")
    return CacheStatsResponse(**cache.stats())
