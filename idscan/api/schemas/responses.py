"""
Pydantic schemas: request/response models for the API.
"""

from pydantic import BaseModel


class IdentityRecordResponse(BaseModel):
    id_number: str | None = None
    name: str | None = None
    gender: str | None = None
    ethnicity: str | None = None
    birth_date: str | None = None
    address: str | None = None
    issuing_authority: str | None = None
    valid_period: str | None = None
    confidence: float | None = None


class RuleViolationResponse(BaseModel):
    rule_id: str
    rule_name: str
    severity: str
    detail: str


class RulesResponse(BaseModel):
    rules_passed: int
    rules_failed: int
    rules_total: int
    violations: list[RuleViolationResponse]
    risk_score: float
    risk_level: str
    rules_version: str


class ExtractionResponse(BaseModel):
    record: IdentityRecordResponse
    rules: RulesResponse | None = None
    is_empty: bool = False
    total_latency_ms: float = 0.0


class ValidateRequest(BaseModel):
    id_number: str


class ValidationResponse(BaseModel):
    id_number: str
    valid: bool
    checksum_ok: bool
    birth_date: str | None = None
    gender: str | None = None
    region_code: str | None = None


class CacheStatsResponse(BaseModel):
    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int
