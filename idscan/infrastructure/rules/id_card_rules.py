"""
Adapter: Resident Identity Card Rules Engine.

Deterministic rules over an extracted record: id number structure,
embedded birth date, optional check digit and cross-field consistency.
Each rule is a pure function returning a violation or None.
"""

from idscan.core.entities.id_number import (
    ID_NUMBER_LENGTH,
    ID_NUMBER_PATTERN,
    birth_date_from_id,
    checksum_digit,
    gender_from_id,
    has_valid_checksum,
    is_structurally_valid,
)
from idscan.core.entities.identity_record import IdentityRecord
from idscan.core.interfaces.rules_engine import IRulesEngine, RulesResult, RuleViolation


class IdCardRulesEngine(IRulesEngine):
    """
    Rules for resident identity card records.

    Rules:
        1. Id number present
        2. Id number length (18)
        3. Id number charset (17 digits + digit/X)
        4. Embedded birth date plausible
        5. Check digit (only when strict_checksum)
        6. Birth date matches the id number
        7. Gender matches the id number
        8. Name present
        9. Recognizer confidence above minimum
    """

    RULES_VERSION = "idcard-v1.0"

    def __init__(
        self,
        strict_checksum: bool = False,
        min_confidence: float = 0.5,
        rules_version: str | None = None,
    ):
        self._strict_checksum = strict_checksum
        self._min_confidence = min_confidence
        self._rules_version = rules_version or self.RULES_VERSION

    def apply(self, record: IdentityRecord) -> RulesResult:
        """Apply every rule to the record."""
        rules = [
            self._rule_id_present,
            self._rule_id_length,
            self._rule_id_format,
            self._rule_id_birth_date,
            self._rule_birth_date_matches_id,
            self._rule_gender_matches_id,
            self._rule_name_present,
            self._rule_confidence,
        ]
        if self._strict_checksum:
            rules.insert(4, self._rule_id_checksum)

        violations: list[RuleViolation] = []
        for rule in rules:
            result = rule(record)
            if result is not None:
                violations.append(result)

        total = len(rules)
        failed = len(violations)
        risk_score = self._compute_risk_score(violations)

        return RulesResult(
            rules_passed=total - failed,
            rules_failed=failed,
            rules_total=total,
            violations=violations,
            risk_score=round(risk_score, 3),
            risk_level=self._risk_level(risk_score),
            rules_version=self._rules_version,
        )

    # ─── RULES ─────────────────────────────────────────────

    def _rule_id_present(self, record: IdentityRecord) -> RuleViolation | None:
        if record.id_number:
            return None
        return RuleViolation(
            rule_id="MISSING_ID_NUMBER",
            rule_name="Id number not detected",
            severity="HIGH",
            detail="No citizen id number was found in the recognized text",
        )

    def _rule_id_length(self, record: IdentityRecord) -> RuleViolation | None:
        id_number = record.id_number
        if not id_number or len(id_number) == ID_NUMBER_LENGTH:
            return None
        return RuleViolation(
            rule_id="ID_LENGTH",
            rule_name="Id number must have 18 characters",
            severity="HIGH",
            detail=f"Id number has {len(id_number)} characters: {id_number}",
        )

    def _rule_id_format(self, record: IdentityRecord) -> RuleViolation | None:
        id_number = record.id_number
        if not id_number or len(id_number) != ID_NUMBER_LENGTH:
            return None  # Covered by the length rule
        if ID_NUMBER_PATTERN.match(id_number):
            return None
        return RuleViolation(
            rule_id="ID_FORMAT",
            rule_name="Id number must be 17 digits followed by a digit or X",
            severity="CRITICAL",
            detail=f"Unexpected characters in id number: {id_number}",
        )

    def _rule_id_birth_date(self, record: IdentityRecord) -> RuleViolation | None:
        id_number = record.id_number
        if not id_number or not ID_NUMBER_PATTERN.match(id_number):
            return None
        if is_structurally_valid(id_number):
            return None
        return RuleViolation(
            rule_id="ID_BIRTH_DATE",
            rule_name="Embedded birth date is implausible",
            severity="CRITICAL",
            detail=f"Month/day out of range in id number: {id_number[6:14]}",
        )

    def _rule_id_checksum(self, record: IdentityRecord) -> RuleViolation | None:
        id_number = record.id_number
        if not id_number or not is_structurally_valid(id_number):
            return None
        if has_valid_checksum(id_number):
            return None
        return RuleViolation(
            rule_id="ID_CHECKSUM",
            rule_name="Id number check digit is wrong",
            severity="CRITICAL",
            detail=(
                f"Expected check digit {checksum_digit(id_number[:17])}, "
                f"found {id_number[17]}"
            ),
        )

    def _rule_birth_date_matches_id(self, record: IdentityRecord) -> RuleViolation | None:
        embedded = birth_date_from_id(record.id_number)
        if embedded is None or not record.birth_date:
            return None
        if record.birth_date == embedded:
            return None
        return RuleViolation(
            rule_id="BIRTH_DATE_MISMATCH",
            rule_name="Birth date differs from the id number",
            severity="HIGH",
            detail=f"Printed {record.birth_date}, id number encodes {embedded}",
        )

    def _rule_gender_matches_id(self, record: IdentityRecord) -> RuleViolation | None:
        embedded = gender_from_id(record.id_number)
        if embedded is None or not record.gender:
            return None
        if record.gender == embedded:
            return None
        return RuleViolation(
            rule_id="GENDER_MISMATCH",
            rule_name="Gender differs from the id number",
            severity="MEDIUM",
            detail=f"Printed {record.gender}, id number encodes {embedded}",
        )

    def _rule_name_present(self, record: IdentityRecord) -> RuleViolation | None:
        if record.name:
            return None
        return RuleViolation(
            rule_id="MISSING_NAME",
            rule_name="Name not detected",
            severity="MEDIUM",
            detail="The name field was not found in the recognized text",
        )

    def _rule_confidence(self, record: IdentityRecord) -> RuleViolation | None:
        if record.confidence is None or record.confidence >= self._min_confidence:
            return None
        return RuleViolation(
            rule_id="LOW_OCR_CONFIDENCE",
            rule_name="Recognizer confidence too low",
            severity="MEDIUM",
            detail=(
                f"Average confidence: {record.confidence:.2f} "
                f"(minimum: {self._min_confidence:.2f})"
            ),
        )

    # ─── Helpers ─────────────────────────────────────────────

    @staticmethod
    def _compute_risk_score(violations: list[RuleViolation]) -> float:
        if not violations:
            return 0.0

        severity_weights = {
            "LOW": 0.1,
            "MEDIUM": 0.25,
            "HIGH": 0.5,
            "CRITICAL": 1.0,
        }

        total_weight = sum(
            severity_weights.get(v.severity, 0.25) for v in violations
        )
        return min(total_weight, 1.0)

    @staticmethod
    def _risk_level(score: float) -> str:
        if score < 0.2:
            return "LOW"
        elif score < 0.5:
            return "MEDIUM"
        elif score < 0.8:
            return "HIGH"
        return "CRITICAL"
