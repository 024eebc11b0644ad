"""Contract tool: turn negotiated terms into a structured license contract."""

from dataclasses import dataclass

from soundchain.tools.pricing import (
    PriceBreakdown,
    calculate_license_price,
    format_money,
)
from soundchain.tools.terms import NegotiationRequest, normalize_rights, parse_flag


@dataclass(frozen=True)
class LicenseContract:
    price: float
    currency: str
    usage_rights: tuple[str, ...]
    exclusivity: bool
    territory: str
    duration_months: int | None  # None = perpetual
    attribution: bool
    summary: str
    custom_terms: str | None = None
    breakdown: PriceBreakdown | None = None

    def to_dict(self) -> dict:
        data = {
            "price": self.price,
            "currency": self.currency,
            "usageRights": list(self.usage_rights),
            "exclusivity": self.exclusivity,
            "territory": self.territory,
            "duration": self.duration_months,
            "attribution": self.attribution,
            "summary": self.summary,
        }
        if self.custom_terms:
            data["customTerms"] = self.custom_terms
        if self.breakdown:
            data["breakdown"] = self.breakdown.to_dict()
        return data


def _pick(terms: dict, *keys, default=None):
    for key in keys:
        if terms.get(key) is not None:
            return terms[key]
    return default


def describe_duration(duration_months: int | None) -> str:
    if not duration_months:
        return "Perpetual"
    years, months = divmod(duration_months, 12)
    parts = []
    if years:
        parts.append(f"{years} year(s)")
    if months:
        parts.append(f"{months} month(s)")
    return " ".join(parts)


def build_summary(
    price: float,
    usage_rights,
    exclusivity: bool,
    territory: str,
    duration_months: int | None,
    attribution: bool,
) -> str:
    """One-line human readable summary, always in the same field order."""
    parts = [
        f"{'Exclusive' if exclusivity else 'Non-exclusive'} license for "
        f"{format_money(price)}",
        f"Rights: {', '.join(usage_rights)}",
        f"Territory: {territory}",
        f"Duration: {describe_duration(duration_months)}",
    ]
    if attribution:
        parts.append("Attribution required")
    return " • ".join(parts)


def generate_contract(terms: dict, base_price: float | None = None) -> LicenseContract:
    """Build a license contract from negotiated terms.

    ``terms`` uses the wire keys (``usageRights``, ``duration``, ...) and also
    accepts snake_case. When ``base_price`` is given, the formula breakdown for
    the same terms is attached; it may differ from the negotiated price.
    The producer's price floor is not checked here.
    """
    price = float(_pick(terms, "price", default=0) or 0)
    usage_rights = tuple(
        normalize_rights(_pick(terms, "usageRights", "usage_rights", default=[]))
    )
    exclusivity = parse_flag(_pick(terms, "exclusivity"))
    territory = _pick(terms, "territory", default="worldwide") or "worldwide"
    duration = _pick(terms, "duration", "duration_months")
    duration_months = int(duration) if duration else None
    attribution = parse_flag(_pick(terms, "attribution"), default=True)

    breakdown = None
    if base_price is not None:
        breakdown = calculate_license_price(
            base_price,
            NegotiationRequest(
                usage_rights=usage_rights,
                exclusivity=exclusivity,
                territory=str(territory).lower(),
                duration_months=duration_months,
            ),
        )

    return LicenseContract(
        price=price,
        currency=_pick(terms, "currency", default="USD") or "USD",
        usage_rights=usage_rights,
        exclusivity=exclusivity,
        territory=territory,
        duration_months=duration_months,
        attribution=attribution,
        custom_terms=_pick(terms, "customTerms", "custom_terms"),
        summary=build_summary(
            price, usage_rights, exclusivity, territory, duration_months, attribution
        ),
        breakdown=breakdown,
    )
