"""Unit tests for plan form input parsing"""

import pytest
from datetime import date
from arrangement_gateway.domain.drafts import PlanDraft
from arrangement_gateway.domain.parsing import (
    UNTIL_PAID,
    parse_currency,
    parse_date,
    parse_draft,
    parse_max_term,
    parse_payment_counts,
    parse_percentage,
)
from arrangement_gateway.utils.date_utils import format_display_date


@pytest.mark.parametrize(
    "raw,cents",
    [
        ("150", 15000),
        ("150.00", 15000),
        ("  42.5 ", 4250),
        ("0.01", 1),
        ("19.999", 2000),
        ("0.005", 1),
        (".75", 75),
        ("-5", -500),
        ("0", 0),
    ],
)
def test_parse_currency_to_cents(raw, cents):
    """Test dollars become round(number * 100) cents"""
    assert parse_currency(raw) == cents


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "abc", "12.34.56", "$150", "1,000", "1e3", "12a", None, "1" * 27, "9" * 30 + ".5", "١٥٠", "１５０"],
)
def test_parse_currency_rejects_malformed(raw):
    assert parse_currency(raw) is None


def test_parse_percentage_rejects_oversized_and_non_ascii_digits():
    """Test inputs too long for fixed-point or written in other scripts read as absent"""
    assert parse_percentage("9" * 30) is None
    assert parse_percentage("٦٠") is None
    assert parse_max_term("١٢") is None


def test_parse_currency_never_uses_float_drift():
    """Test 1.005 rounds up to 101 cents (binary floats would give 100)"""
    assert parse_currency("1.005") == 101
    assert parse_currency("0.29") == 29


def test_parse_percentage_to_basis_points():
    assert parse_percentage("60") == 6000
    assert parse_percentage("100") == 10000
    assert parse_percentage("12.5") == 1250
    assert parse_percentage("33.333") == 3333
    assert parse_percentage("100.01") == 10001  # Parses; the validator rejects it
    assert parse_percentage("sixty") is None
    assert parse_percentage("") is None


def test_parse_max_term():
    """Test sentinel means unbounded and months are truncated"""
    assert parse_max_term("12") == 12
    assert parse_max_term("12.9") == 12
    assert parse_max_term(" 6 ") == 6
    assert parse_max_term(UNTIL_PAID) is None
    assert parse_max_term("") is None
    assert parse_max_term("-3") == -3
    assert parse_max_term("soon") is None


def test_parse_date_strict_iso():
    assert parse_date("2025-03-01") == date(2025, 3, 1)
    assert parse_date(" 2024-02-29 ") == date(2024, 2, 29)


@pytest.mark.parametrize(
    "raw",
    ["2024-02-30", "2023-02-29", "2025-13-01", "2025-3-1", "03/01/2025", "20250301", "٢٠٢٥-٠٣-٠١", "", None],
)
def test_parse_date_rejects_invalid(raw):
    assert parse_date(raw) is None


def test_parse_payment_counts():
    """Test comma lists, dropping blank, invalid and non-positive tokens"""
    assert parse_payment_counts("1,3,6") == [1, 3, 6]
    assert parse_payment_counts("1, ,6") == [1, 6]
    assert parse_payment_counts("") == []
    assert parse_payment_counts(" 2 , x, 0, -4, 2.5, 12") == [2, 12]
    assert parse_payment_counts("3,1,3") == [3, 1]
    assert parse_payment_counts("1,٣") == [1]


def test_format_display_date():
    assert format_display_date(date(2025, 3, 1)) == "Mar 1, 2025"
    assert format_display_date(date(2024, 12, 25)) == "Dec 25, 2024"


def test_parse_draft_tracks_malformed_inputs():
    """Test filled-in but unreadable inputs are flagged, blank ones are not"""
    draft = PlanDraft(
        name="  Plan A ",
        balance_tier="under_3000",
        plan_type="range",
        monthly_payment_min="abc",
        monthly_payment_max="",
        max_term_months="forever",
        due_date="2024-02-30",
    )

    fields = parse_draft(draft)

    assert fields.name == "Plan A"
    assert fields.monthly_payment_min_cents is None
    assert fields.malformed == {"monthly_payment_min_cents", "max_term_months", "due_date"}


def test_parse_draft_until_paid_is_not_malformed():
    fields = parse_draft(PlanDraft(name="Plan", max_term_months=UNTIL_PAID))

    assert fields.max_term_months is None
    assert "max_term_months" not in fields.malformed
