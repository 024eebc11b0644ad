"""Validation tools: usage rights and price floor checks."""

from dataclasses import dataclass, field

from soundchain.tools.pricing import format_money
from soundchain.tools.terms import normalize_rights


@dataclass(frozen=True)
class RightsValidation:
    valid: bool
    invalid_rights: list[str] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "invalidRights": list(self.invalid_rights),
            "message": self.message,
        }


@dataclass(frozen=True)
class PriceValidation:
    valid: bool
    message: str

    def to_dict(self) -> dict:
        return {"valid": self.valid, "message": self.message}


def validate_usage_rights(requested, allowed) -> RightsValidation:
    """Check requested rights against the producer's allow-list.

    Comparison is case-insensitive; invalid rights keep the order in which
    they were requested.
    """
    allowed_set = set(normalize_rights(allowed))
    invalid = [r for r in normalize_rights(requested) if r not in allowed_set]

    if invalid:
        return RightsValidation(
            valid=False,
            invalid_rights=invalid,
            message=(
                f"These rights are not available: {', '.join(invalid)}. "
                f"Available rights: {', '.join(normalize_rights(allowed))}"
            ),
        )
    return RightsValidation(
        valid=True, invalid_rights=[], message="All requested rights are available"
    )


def validate_price(offered: float, minimum: float) -> PriceValidation:
    """Return whether the offered price meets the producer's minimum."""
    if offered < minimum:
        return PriceValidation(
            valid=False,
            message=(
                f"Price {format_money(offered)} is below minimum of "
                f"{format_money(minimum)}"
            ),
        )
    return PriceValidation(
        valid=True, message=f"Price {format_money(offered)} meets minimum requirement"
    )
