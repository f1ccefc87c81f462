"""
Extraction rules.

A field is extracted by walking an ordered tuple of rules; the first
rule that produces a match wins. Rules are plain values tagged by
kind, not subclasses:

    PATTERN    regex searched over the whitespace-collapsed text
    LINE_SCAN  predicate tested against each recognized line
    DERIVED    computed from fields already extracted in this pass
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable


class RuleKind(str, Enum):
    PATTERN = "PATTERN"
    LINE_SCAN = "LINE_SCAN"
    DERIVED = "DERIVED"


@dataclass(frozen=True)
class ExtractionContext:
    """Input of one extraction pass."""
    text: str                          # whitespace runs collapsed, trimmed
    lines: tuple[str, ...]             # non-empty recognized lines, collapsed
    found: dict = field(default_factory=dict)  # fields extracted so far

    @classmethod
    def from_raw(cls, raw_text: str) -> "ExtractionContext":
        text = re.sub(r"\s+", " ", raw_text).strip()
        lines = tuple(
            collapsed
            for collapsed in (re.sub(r"\s+", " ", line).strip() for line in raw_text.splitlines())
            if collapsed
        )
        return cls(text=text, lines=lines)


@dataclass(frozen=True)
class ExtractionRule:
    """One step of a field cascade."""
    rule_id: str
    kind: RuleKind
    pattern: re.Pattern | None = None
    predicate: Callable[[str], bool] | None = None
    derive: Callable[[dict], str | None] | None = None

    def apply(self, ctx: ExtractionContext) -> tuple[str, ...] | None:
        """Captured values, or None when the rule does not match."""
        if self.kind is RuleKind.PATTERN:
            match = self.pattern.search(ctx.text)
            return match.groups() if match else None

        if self.kind is RuleKind.LINE_SCAN:
            for line in ctx.lines:
                if self.predicate(line):
                    return (line,)
            return None

        value = self.derive(ctx.found)  # RuleKind.DERIVED
        return (value,) if value else None


def pattern_rule(rule_id: str, regex: str) -> ExtractionRule:
    return ExtractionRule(rule_id, RuleKind.PATTERN, pattern=re.compile(regex))


def line_rule(rule_id: str, predicate: Callable[[str], bool]) -> ExtractionRule:
    return ExtractionRule(rule_id, RuleKind.LINE_SCAN, predicate=predicate)


def derived_rule(rule_id: str, derive: Callable[[dict], str | None]) -> ExtractionRule:
    return ExtractionRule(rule_id, RuleKind.DERIVED, derive=derive)


def run_cascade(
    rules: tuple[ExtractionRule, ...], ctx: ExtractionContext
) -> tuple[str, tuple[str, ...]] | None:
    """(rule_id, captured values) of the first matching rule."""
    for rule in rules:
        captured = rule.apply(ctx)
        if captured is not None:
            return rule.rule_id, captured
    return None
