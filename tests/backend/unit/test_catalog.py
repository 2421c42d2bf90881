"""
Unit tests for services.catalog module.
Tests billing period arithmetic, tier resolution and validation helpers.
"""
import datetime as dt
from decimal import Decimal

from wordmate.services.catalog import (
    PURCHASE_PLANS,
    compute_end_date,
    format_amount,
    get_purchase_plan,
    is_valid_email,
    resolve_tier,
)

UTC = dt.timezone.utc


class TestComputeEndDate:
    """Tests for end dates per billing period."""

    def test_yearly_adds_one_calendar_year(self):
        start = dt.datetime(2023, 3, 15, 10, 30, tzinfo=UTC)
        assert compute_end_date("年付", start) == dt.datetime(2024, 3, 15, 10, 30, tzinfo=UTC)

    def test_yearly_from_leap_day_clamps_to_feb_28(self):
        start = dt.datetime(2024, 2, 29, 8, 0, tzinfo=UTC)
        assert compute_end_date("年付", start) == dt.datetime(2025, 2, 28, 8, 0, tzinfo=UTC)

    def test_monthly_clamps_to_month_end(self):
        start = dt.datetime(2024, 1, 31, tzinfo=UTC)
        assert compute_end_date("月付", start) == dt.datetime(2024, 2, 29, tzinfo=UTC)

    def test_monthly_regular(self):
        start = dt.datetime(2024, 5, 10, tzinfo=UTC)
        assert compute_end_date("月付", start) == dt.datetime(2024, 6, 10, tzinfo=UTC)

    def test_lifetime_is_one_hundred_years_out(self):
        start = dt.datetime(2024, 6, 1, tzinfo=UTC)
        assert compute_end_date("终身", start) == dt.datetime(2124, 6, 1, tzinfo=UTC)

    def test_unknown_or_missing_period_is_unbounded(self):
        start = dt.datetime(2024, 6, 1, tzinfo=UTC)
        assert compute_end_date("季付", start) is None
        assert compute_end_date(None, start) is None
        assert compute_end_date("", start) is None


class TestResolveTier:
    """Tests for plan display name -> tier mapping."""

    def test_known_names(self):
        assert resolve_tier("高级版") == ("premium", True)
        assert resolve_tier("旗舰版") == ("flagship", True)
        assert resolve_tier("终身版") == ("flagship_lifetime", True)
        assert resolve_tier("免费版") == ("free", True)

    def test_missing_name_is_default_premium(self):
        assert resolve_tier(None) == ("premium", True)

    def test_unknown_name_falls_back_to_premium_and_is_flagged(self):
        assert resolve_tier("豪华版") == ("premium", False)


class TestPurchaseCatalog:
    """Tests for the purchasable plan table and input helpers."""

    def test_five_plan_period_combinations(self):
        assert set(PURCHASE_PLANS) == {
            "premium-month",
            "premium-year",
            "flagship-month",
            "flagship-year",
            "flagship-lifetime",
        }

    def test_get_purchase_plan(self):
        plan = get_purchase_plan("flagship-lifetime")
        assert plan.name == "旗舰版"
        assert plan.period == "终身"
        assert plan.price == Decimal("20")
        assert get_purchase_plan("gold-month") is None
        assert get_purchase_plan(None) is None
        assert get_purchase_plan(["premium-month"]) is None

    def test_email_validation(self):
        assert is_valid_email("buyer@example.com")
        assert not is_valid_email("buyer@example")
        assert not is_valid_email("buyer example@x.com")
        assert not is_valid_email("")
        assert not is_valid_email(None)
        assert not is_valid_email(123)

    def test_format_amount(self):
        assert format_amount(3) == "¥3.00"
        assert format_amount(Decimal("15.5")) == "¥15.50"
