"""Tests for the license price formula."""

import pytest

from soundchain.tools.pricing import calculate_license_price, format_money
from soundchain.tools.terms import BaseTerms, NegotiationRequest, parse_flag


def price(base=100, **kwargs):
    return calculate_license_price(base, NegotiationRequest(**kwargs))


class TestCalculateLicensePrice:
    def test_youtube_commercial_worldwide(self):
        result = price(usage_rights=("YOUTUBE", "COMMERCIAL"), territory="worldwide")
        # 100 * (1 + 0.5 + 0.2) * 1.0 * 1.5 * 1.0
        assert result.usage_multiplier == 1.7
        assert result.exclusivity_multiplier == 1.0
        assert result.territory_multiplier == 1.5
        assert result.duration_discount == 1.0
        assert result.final_price == 255.0

    def test_deterministic(self):
        request = NegotiationRequest(usage_rights=("YOUTUBE", "COMMERCIAL"))
        first = calculate_license_price(100, request)
        second = calculate_license_price(100, request)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_no_rights_regional_is_base_price(self):
        result = price(usage_rights=(), territory="regional")
        assert result.final_price == 100.0
        assert result.usage_multiplier == 1.0
        assert result.territory_multiplier == 1.0

    def test_exclusive(self):
        result = price(exclusivity=True, territory="regional")
        assert result.exclusivity_multiplier == 2.5
        assert result.final_price == 250.0

    def test_rights_are_case_insensitive(self):
        assert price(usage_rights=("youtube",)).final_price == price(
            usage_rights=("YOUTUBE",)
        ).final_price

    def test_youtube_and_tiktok_share_one_bonus(self):
        assert price(usage_rights=("YOUTUBE", "TIKTOK")).usage_multiplier == 1.2

    def test_movie_and_tv_aliases(self):
        assert price(usage_rights=("MOVIE",)).usage_multiplier == 1.4
        assert price(usage_rights=("TV",)).usage_multiplier == 1.3

    def test_unknown_right_adds_nothing(self):
        assert price(usage_rights=("PODCAST",)).usage_multiplier == 1.0

    def test_rounds_half_up_to_cents(self):
        # 33.33 * 1.1 * 1.5 = 54.9945
        result = price(base=33.33, usage_rights=("STREAMING",))
        assert result.final_price == 54.99

    def test_never_clamped_to_base_price(self):
        result = price(base=100, usage_rights=(), territory="regional", duration_months=6)
        assert result.final_price == 70.0

    def test_reasoning_lists_applied_factors(self):
        result = price(
            usage_rights=("COMMERCIAL", "STREAMING"),
            exclusivity=True,
            territory="national",
            duration_months=24,
        )
        assert "Base price: $100" in result.reasoning
        assert "Commercial use: +50%" in result.reasoning
        assert "Streaming rights: +10%" in result.reasoning
        assert "Exclusive license: 2.5x multiplier" in result.reasoning
        assert "National territory: +20%" in result.reasoning
        assert "3-year duration: 15% discount" in result.reasoning
        assert result.reasoning.endswith(f"Final price: {format_money(result.final_price)}")

    def test_to_dict_shape(self):
        data = price(usage_rights=("YOUTUBE",)).to_dict()
        assert set(data) == {"finalPrice", "breakdown", "reasoning"}
        assert set(data["breakdown"]) == {
            "basePrice",
            "usageMultiplier",
            "exclusivityMultiplier",
            "territoryMultiplier",
            "durationDiscount",
        }


class TestDurationDiscount:
    @pytest.mark.parametrize(
        "months, discount",
        [(1, 0.7), (12, 0.7), (13, 0.85), (36, 0.85), (37, 1.0), (None, 1.0)],
    )
    def test_boundaries(self, months, discount):
        assert price(duration_months=months).duration_discount == discount


class TestMonotonicity:
    @pytest.mark.parametrize(
        "right", ["COMMERCIAL", "BROADCAST", "FILM", "STREAMING", "YOUTUBE", "TIKTOK"]
    )
    def test_adding_a_right_never_lowers_price(self, right):
        before = price(usage_rights=("PODCAST",))
        after = price(usage_rights=("PODCAST", right))
        assert after.final_price >= before.final_price

    def test_exclusivity_never_lowers_price(self):
        assert price(exclusivity=True).final_price >= price(exclusivity=False).final_price

    def test_territory_order(self):
        regional = price(territory="regional").final_price
        national = price(territory="national").final_price
        worldwide = price(territory="worldwide").final_price
        assert regional <= national <= worldwide


class TestFormatMoney:
    def test_whole_amount(self):
        assert format_money(100) == "$100"

    def test_cents(self):
        assert format_money(127.5) == "$127.50"


class TestToolArguments:
    @pytest.mark.parametrize(
        "value, expected",
        [("false", False), ("true", True), ("False ", False), ("yes", True), (0, False), (True, True)],
    )
    def test_parse_flag(self, value, expected):
        assert parse_flag(value) is expected

    def test_missing_flag_uses_default(self):
        assert parse_flag(None) is False
        assert parse_flag(None, default=True) is True

    def test_string_exclusivity(self):
        request = NegotiationRequest.from_arguments({"usageRights": [], "exclusivity": "false"})
        assert request.exclusivity is False
        assert NegotiationRequest.from_arguments({"exclusivity": "true"}).exclusivity is True

    def test_string_false_is_not_priced_as_exclusive(self):
        request = NegotiationRequest.from_arguments({"exclusivity": "false", "territory": "regional"})
        assert calculate_license_price(100, request).final_price == 100.0

    def test_base_terms_exclusivity_available(self):
        assert BaseTerms.from_dict({"minPrice": 50, "exclusivityAvailable": "false"}).exclusivity_available is False
        assert BaseTerms.from_dict({"minPrice": 50}).exclusivity_available is True
