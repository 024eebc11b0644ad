"""Pricing tools: license price formula and its breakdown."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from soundchain.tools.terms import NegotiationRequest, normalize_rights

# (rights that trigger the bonus, bonus, reasoning line)
USAGE_BONUSES = (
    (("COMMERCIAL",), Decimal("0.5"), "Commercial use: +50%"),
    (("FILM", "MOVIE"), Decimal("0.4"), "Film/movie rights: +40%"),
    (("BROADCAST", "TV"), Decimal("0.3"), "Broadcast rights: +30%"),
    (("STREAMING",), Decimal("0.1"), "Streaming rights: +10%"),
    (("YOUTUBE", "TIKTOK"), Decimal("0.2"), "Social media rights: +20%"),
)

EXCLUSIVITY_MULTIPLIER = Decimal("2.5")

TERRITORY_MULTIPLIERS = {
    "worldwide": (Decimal("1.5"), "Worldwide territory: +50%"),
    "national": (Decimal("1.2"), "National territory: +20%"),
}

# (max months, discount, reasoning line), checked in order
DURATION_DISCOUNTS = (
    (12, Decimal("0.7"), "1-year duration: 30% discount"),
    (36, Decimal("0.85"), "3-year duration: 15% discount"),
)

CENTS = Decimal("0.01")


def format_money(amount: float) -> str:
    """Render a dollar amount without trailing zeros for whole numbers."""
    value = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        return f"${int(value)}"
    return f"${value}"


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: float
    usage_multiplier: float
    exclusivity_multiplier: float
    territory_multiplier: float
    duration_discount: float
    final_price: float
    reasoning: str

    def to_dict(self) -> dict:
        return {
            "finalPrice": self.final_price,
            "breakdown": {
                "basePrice": self.base_price,
                "usageMultiplier": self.usage_multiplier,
                "exclusivityMultiplier": self.exclusivity_multiplier,
                "territoryMultiplier": self.territory_multiplier,
                "durationDiscount": self.duration_discount,
            },
            "reasoning": self.reasoning,
        }


def calculate_license_price(
    base_price: float, request: NegotiationRequest
) -> PriceBreakdown:
    """Price a license from the producer's base price and the requested terms.

    Multipliers apply in order: usage, exclusivity, territory, duration.
    The result is rounded half-up to cents and is never clamped to the base
    price; enforcing the producer's floor is up to the caller.
    """
    rights = set(normalize_rights(request.usage_rights))
    reasons = [f"Base price: {format_money(base_price)}"]

    usage = Decimal("1.0")
    for triggers, bonus, line in USAGE_BONUSES:
        if rights.intersection(triggers):
            usage += bonus
            reasons.append(line)

    exclusivity = EXCLUSIVITY_MULTIPLIER if request.exclusivity else Decimal("1.0")
    if request.exclusivity:
        reasons.append("Exclusive license: 2.5x multiplier")

    territory, territory_line = TERRITORY_MULTIPLIERS.get(
        (request.territory or "").lower(), (Decimal("1.0"), None)
    )
    if territory_line:
        reasons.append(territory_line)

    duration = Decimal("1.0")
    if request.duration_months:
        for max_months, discount, line in DURATION_DISCOUNTS:
            if request.duration_months <= max_months:
                duration = discount
                reasons.append(line)
                break

    price = Decimal(str(base_price)) * usage * exclusivity * territory * duration
    final_price = float(price.quantize(CENTS, rounding=ROUND_HALF_UP))
    reasons.append(f"Final price: {format_money(final_price)}")

    return PriceBreakdown(
        base_price=float(base_price),
        usage_multiplier=float(usage),
        exclusivity_multiplier=float(exclusivity),
        territory_multiplier=float(territory),
        duration_discount=float(duration),
        final_price=final_price,
        reasoning=" • ".join(reasons),
    )
