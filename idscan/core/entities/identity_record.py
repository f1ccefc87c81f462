"""
Entity: Identity Record

Structured fields read from a resident identity card.
Pure model, no framework dependency.
"""

from dataclasses import asdict, dataclass, fields


LONG_TERM = "long-term"


@dataclass(frozen=True)
class IdentityRecord:
    """Fields extracted from one card image. None means "not found"."""
    id_number: str | None = None          # 18 chars: 17 digits + digit/X
    name: str | None = None
    gender: str | None = None             # "男" / "女"
    ethnicity: str | None = None          # ex: "汉族"
    birth_date: str | None = None         # YYYY-MM-DD
    address: str | None = None            # <= 70 chars, contains ideographs
    issuing_authority: str | None = None
    valid_period: str | None = None       # "<start>-<end>", end may be LONG_TERM
    confidence: float | None = None       # passthrough from the recognizer

    @classmethod
    def empty(cls) -> "IdentityRecord":
        return cls()

    def is_empty(self) -> bool:
        """True when no text field was found."""
        return all(
            getattr(self, f.name) is None
            for f in fields(self)
            if f.name != "confidence"
        )

    def to_dict(self) -> dict:
        return asdict(self)
