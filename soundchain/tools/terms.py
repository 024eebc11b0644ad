"""Producer base terms, buyer requests and license presets."""

from dataclasses import dataclass, field

DEFAULT_ALLOWED_RIGHTS = ("STREAMING", "YOUTUBE", "PODCAST", "COMMERCIAL")
TERRITORIES = ("regional", "national", "worldwide")
TRUE_STRINGS = ("true", "yes", "1")


def normalize_rights(rights) -> list[str]:
    """Upper-case usage rights, dropping blanks and duplicates but keeping order."""
    normalized = []
    for right in rights or []:
        tag = str(right).strip().upper()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


def parse_flag(value, default: bool = False) -> bool:
    """Read a boolean from loosely typed tool arguments ('false' is False)."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class BaseTerms:
    min_price: float
    allowed_usage_rights: tuple[str, ...] = DEFAULT_ALLOWED_RIGHTS
    exclusivity_available: bool = True
    territory: str = "worldwide"

    @classmethod
    def from_dict(cls, data: dict) -> "BaseTerms":
        """Build from the camelCase wire shape, filling producer defaults."""
        allowed = data.get("allowedUsageRights") or DEFAULT_ALLOWED_RIGHTS
        return cls(
            min_price=float(data.get("minPrice") or 0),
            allowed_usage_rights=tuple(normalize_rights(allowed)),
            exclusivity_available=parse_flag(data.get("exclusivityAvailable"), default=True),
            territory=data.get("territory") or "worldwide",
        )

    def to_dict(self) -> dict:
        return {
            "minPrice": self.min_price,
            "allowedUsageRights": list(self.allowed_usage_rights),
            "exclusivityAvailable": self.exclusivity_available,
            "territory": self.territory,
        }


@dataclass(frozen=True)
class NegotiationRequest:
    usage_rights: tuple[str, ...] = ()
    exclusivity: bool = False
    territory: str = "worldwide"
    duration_months: int | None = None

    @classmethod
    def from_arguments(cls, arguments: dict) -> "NegotiationRequest":
        """Build from tool-call arguments (camelCase or snake_case keys)."""
        rights = arguments.get("usageRights", arguments.get("usage_rights", []))
        duration = arguments.get("duration", arguments.get("duration_months"))
        return cls(
            usage_rights=tuple(normalize_rights(rights)),
            exclusivity=parse_flag(arguments.get("exclusivity")),
            territory=str(arguments.get("territory") or "worldwide").lower(),
            duration_months=int(duration) if duration else None,
        )

    def to_dict(self) -> dict:
        return {
            "usageRights": list(self.usage_rights),
            "exclusivity": self.exclusivity,
            "territory": self.territory,
            "duration": self.duration_months,
        }


@dataclass(frozen=True)
class UsageRightPackage:
    key: str
    name: str
    rights: tuple[str, ...]
    multiplier: float
    description: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rights": list(self.rights),
            "multiplier": self.multiplier,
            "description": self.description,
        }


@dataclass(frozen=True)
class LicensePresets:
    """Reference packages shown to agents; they never feed the price formula."""

    packages: tuple[UsageRightPackage, ...] = field(default_factory=tuple)

    def get(self, key: str) -> UsageRightPackage | None:
        for package in self.packages:
            if package.key == key:
                return package
        return None

    def to_dict(self) -> dict:
        return {p.key: p.to_dict() for p in self.packages}


DEFAULT_PRESETS = LicensePresets(
    packages=(
        UsageRightPackage(
            "youtube-basic", "YouTube Basic", ("YOUTUBE", "STREAMING"), 1.3,
            "Personal YouTube videos, non-monetized",
        ),
        UsageRightPackage(
            "youtube-monetized", "YouTube Monetized",
            ("YOUTUBE", "COMMERCIAL", "STREAMING"), 1.8,
            "YouTube with ads/sponsorships",
        ),
        UsageRightPackage(
            "podcast", "Podcast", ("PODCAST", "STREAMING"), 1.2,
            "Podcast intro/outro music",
        ),
        UsageRightPackage(
            "tiktok-instagram", "TikTok/Instagram",
            ("TIKTOK", "INSTAGRAM", "SOCIAL_MEDIA"), 1.3,
            "Social media content",
        ),
        UsageRightPackage(
            "film-festival", "Film Festival", ("FILM", "FESTIVAL"), 2.0,
            "Film festival screenings",
        ),
        UsageRightPackage(
            "commercial-full", "Full Commercial",
            ("COMMERCIAL", "BROADCAST", "STREAMING", "FILM"), 3.0,
            "Full commercial rights",
        ),
    )
)
