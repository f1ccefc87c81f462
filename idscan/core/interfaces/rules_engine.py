"""
Contract: Rules Engine

Applies deterministic business rules to an extracted record.
Validates format, embedded dates and cross-field consistency.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from idscan.core.entities.identity_record import IdentityRecord


@dataclass
class RuleViolation:
    """One detected rule violation."""
    rule_id: str              # ex: "ID_FORMAT"
    rule_name: str            # ex: "Id number must be 17 digits + digit/X"
    severity: str             # "LOW", "MEDIUM", "HIGH", "CRITICAL"
    detail: str


@dataclass
class RulesResult:
    """Outcome of applying the rule set."""
    rules_passed: int
    rules_failed: int
    rules_total: int
    violations: list[RuleViolation] = field(default_factory=list)
    risk_score: float = 0.0          # 0.0 (clean) to 1.0 (high risk)
    risk_level: str = "LOW"          # "LOW", "MEDIUM", "HIGH", "CRITICAL"
    rules_version: str = ""


class IRulesEngine(ABC):
    """
    Port: Rules Engine

    Never decides for the caller: violations are reported, and the
    caller chooses whether an invalid id number is fatal.
    """

    @abstractmethod
    def apply(self, record: IdentityRecord) -> RulesResult:
        """
        Apply the rule set to a record.

        Args:
            record: Record produced by the field extractor.

        Returns:
            RulesResult with violations, score and risk level.
        """
        ...
