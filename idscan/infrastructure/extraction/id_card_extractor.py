"""
Adapter: Resident Identity Card Field Extractor.

Parses noisy OCR text from the front and back of a second-generation
resident identity card into an IdentityRecord.

Each field is extracted by its own cascade (see rules.py). Labeled
patterns come first because anchoring on the printed label keeps
neighboring fields out of the match; looser patterns, line heuristics
and values derived from the id number follow.
"""

import logging
import re

from idscan.core.entities.identity_record import IdentityRecord, LONG_TERM
from idscan.core.interfaces.field_extractor import IFieldExtractor
from idscan.infrastructure.extraction.date_normalizer import normalize
from idscan.infrastructure.extraction.rules import (
    ExtractionContext,
    ExtractionRule,
    derived_rule,
    line_rule,
    pattern_rule,
    run_cascade,
)
from idscan.core.entities.id_number import (
    birth_date_from_id,
    gender_from_id,
)

logger = logging.getLogger(__name__)


# ─── Pattern building blocks ──────────────────────────────

SEP = r"[\s:：]*"                 # between a label and its value
IDEO = "一-龥"                   # CJK unified ideographs U+4E00..U+9FA5
FULL_DATE = r"[0-9]{4}[-.年\s][0-9]{1,2}[-.月\s][0-9]{1,2}"
LONG_TERM_TOKEN = r"[永久长期]+"

ADDRESS_MAX_LENGTH = 70

# Printed labels and card headers that can never be part of a name
RESERVED_LABELS = re.compile(r"性别|民族|住址|公民|签发|有效|身份证|中华人民")
IDEOGRAPHS_ONLY = re.compile(rf"[{IDEO}]+")
HAS_IDEOGRAPH = re.compile(rf"[{IDEO}]")
HAS_DIGIT = re.compile(r"[0-9]")

# A value position must not start with the next printed label
NOT_A_LABEL = r"(?!出生|住址|性别|民族|公民|签发|有效)"


def _looks_like_name(line: str) -> bool:
    return (
        2 <= len(line) <= 5
        and IDEOGRAPHS_ONLY.fullmatch(line) is not None
        and RESERVED_LABELS.search(line) is None
    )


# ─── Cascades ─────────────────────────────────────────────

ID_NUMBER_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("ID_LABELED", rf"公民身份号码{SEP}([0-9]{{17}}[0-9Xx])"),
    pattern_rule("ID_BARE", r"([0-9]{17}[0-9Xx])"),
)

NAME_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("NAME_LABELED", rf"姓名{SEP}([{IDEO}]{{2,4}})"),
    line_rule("NAME_SHORT_LINE", _looks_like_name),
)

GENDER_ETHNICITY_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule(
        "GENDER_ETHNICITY_JOINT",
        rf"性别{SEP}([男女])\s*民族{SEP}{NOT_A_LABEL}([{IDEO}]+族)",
    ),
)

GENDER_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("GENDER_LABELED", rf"性别{SEP}([男女])"),
    derived_rule("GENDER_FROM_ID", lambda found: gender_from_id(found.get("id_number"))),
)

ETHNICITY_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("ETHNICITY_LABELED", rf"民族{SEP}{NOT_A_LABEL}([{IDEO}]+族)"),
    # Cards print "民族 汉" without the trailing 族
    pattern_rule("ETHNICITY_SHORT", rf"民族{SEP}{NOT_A_LABEL}([{IDEO}]{{1,5}}?)(?=\s|出生|$)"),
)

BIRTH_DATE_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule(
        "BIRTH_YMD_CJK",
        rf"出生{SEP}([0-9]{{4}})\s*年\s*([0-9]{{1,2}})\s*月\s*([0-9]{{1,2}})\s*[日号]",
    ),
    pattern_rule(
        "BIRTH_YMD_DELIMITED",
        rf"出生{SEP}([0-9]{{4}})[-/.]([0-9]{{1,2}})[-/.]([0-9]{{1,2}})",
    ),
    pattern_rule(
        "BIRTH_DATE_LABELED",
        rf"出生日期{SEP}([0-9]{{4}})[-/.年]([0-9]{{1,2}})[-/.月]([0-9]{{1,2}})[日号]?",
    ),
    derived_rule("BIRTH_FROM_ID", lambda found: birth_date_from_id(found.get("id_number"))),
)

ADDRESS_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("ADDRESS_BOUNDED", rf"住址{SEP}(.*?)(?=公民身份|出生|性别|签发)"),
    pattern_rule("ADDRESS_LOOSE", rf"住址{SEP}([{IDEO}a-zA-Z0-9\s.\-]+)"),
)

AUTHORITY_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule("AUTHORITY_BOUNDED", rf"签发机关{SEP}(.*?)(?=有效|公民|出生|[0-9]{{8}}|$)"),
    pattern_rule("AUTHORITY_LOOSE", rf"签发机关{SEP}([{IDEO}\s]+)"),
)

VALID_PERIOD_RULES: tuple[ExtractionRule, ...] = (
    pattern_rule(
        "PERIOD_FULL_DATES",
        rf"有效期限{SEP}({FULL_DATE}[日\s]*)[-\s]*(?:至|-)[-\s]*({FULL_DATE}日*|{LONG_TERM_TOKEN})",
    ),
    pattern_rule(
        "PERIOD_COMPACT_DATES",
        rf"有效期限{SEP}([0-9]{{8}})[-\s]*(?:至|-)[-\s]*([0-9]{{8}}|{LONG_TERM_TOKEN})",
    ),
)


class IdCardFieldExtractor(IFieldExtractor):
    """
    Regex cascade extractor for resident identity cards.

    Stateless: one instance can serve concurrent callers.
    """

    def extract(self, raw_text: str) -> IdentityRecord:
        if not isinstance(raw_text, str) or not raw_text.strip():
            return IdentityRecord.empty()

        ctx = ExtractionContext.from_raw(raw_text)
        found = ctx.found

        # id number first: gender and birth date fall back to it
        found["id_number"] = self._extract_id_number(ctx)
        found["name"] = self._first_value("name", NAME_RULES, ctx)
        found["gender"], found["ethnicity"] = self._extract_gender_ethnicity(ctx)
        found["birth_date"] = self._extract_birth_date(ctx)
        found["address"] = self._extract_address(ctx)
        found["issuing_authority"] = self._extract_authority(ctx)
        found["valid_period"] = self._extract_valid_period(ctx)

        return IdentityRecord(**found)

    # ─── Fields ──────────────────────────────────────────────

    def _extract_id_number(self, ctx: ExtractionContext) -> str | None:
        value = self._first_value("id_number", ID_NUMBER_RULES, ctx)
        return value.upper() if value else None

    def _extract_gender_ethnicity(self, ctx: ExtractionContext) -> tuple[str | None, str | None]:
        hit = self._cascade("gender+ethnicity", GENDER_ETHNICITY_RULES, ctx)
        if hit is not None:
            gender, ethnicity = hit
            return gender, ethnicity

        # Each one on its own; any subset may succeed
        return (
            self._first_value("gender", GENDER_RULES, ctx),
            self._first_value("ethnicity", ETHNICITY_RULES, ctx),
        )

    def _extract_birth_date(self, ctx: ExtractionContext) -> str | None:
        hit = self._cascade("birth_date", BIRTH_DATE_RULES, ctx)
        if hit is None:
            return None
        if len(hit) == 3:
            return normalize("-".join(hit))
        return normalize(hit[0])

    def _extract_address(self, ctx: ExtractionContext) -> str | None:
        value = self._first_value("address", ADDRESS_RULES, ctx)
        if value is None:
            return None

        address = re.sub(r"\s+", "", value)[:ADDRESS_MAX_LENGTH]
        # Digits/punctuation only: extraction noise, not an address
        if not HAS_IDEOGRAPH.search(address):
            logger.debug(f"Discarding address without ideographs: {address!r}")
            return None
        return address

    def _extract_authority(self, ctx: ExtractionContext) -> str | None:
        value = self._first_value("issuing_authority", AUTHORITY_RULES, ctx)
        if value is None:
            return None
        return re.sub(r"\s+", "", value) or None

    def _extract_valid_period(self, ctx: ExtractionContext) -> str | None:
        hit = self._cascade("valid_period", VALID_PERIOD_RULES, ctx)
        if hit is None:
            return None
        start, end = (self._period_side(side) for side in hit)
        return f"{start}-{end}"

    # ─── Helpers ─────────────────────────────────────────────

    @staticmethod
    def _period_side(side: str) -> str:
        side = side.strip()
        if not HAS_DIGIT.search(side):
            return LONG_TERM
        return normalize(side)

    @staticmethod
    def _cascade(
        field_name: str, rules: tuple[ExtractionRule, ...], ctx: ExtractionContext
    ) -> tuple[str, ...] | None:
        result = run_cascade(rules, ctx)
        if result is None:
            return None
        rule_id, captured = result
        logger.debug(f"{field_name}: matched {rule_id}")
        return captured

    def _first_value(
        self, field_name: str, rules: tuple[ExtractionRule, ...], ctx: ExtractionContext
    ) -> str | None:
        captured = self._cascade(field_name, rules, ctx)
        if captured is None:
            return None
        value = captured[0].strip()
        return value or None
