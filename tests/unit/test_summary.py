"""Unit tests for plan summaries"""

from datetime import date
from arrangement_gateway.domain.models import (
    ArrangementPlan,
    CustomTerms,
    FixedMonthlyTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
    PaymentFrequency,
    PlanSummary,
    PlanType,
    RangeTerms,
    SettlementTerms,
)
from arrangement_gateway.domain.summary import (
    format_basis_points,
    format_cents,
    format_payment_counts,
    plan_type_label,
    summarize_plan,
)
from arrangement_gateway.domain.tiers import BalanceTier


def plan_with(terms) -> ArrangementPlan:
    return ArrangementPlan(name="Plan", balance_tier=BalanceTier.UNDER_3000, terms=terms)


def test_format_cents():
    assert format_cents(15000) == "$150.00"
    assert format_cents(5) == "$0.05"
    assert format_cents(123456789) == "$1,234,567.89"


def test_format_basis_points():
    assert format_basis_points(6000) == "60%"
    assert format_basis_points(6050) == "60.5%"
    assert format_basis_points(6025) == "60.25%"
    assert format_basis_points(10000) == "100%"
    assert format_basis_points(5) == "0.05%"


def test_format_payment_counts():
    assert format_payment_counts([1]) == "1 payment"
    assert format_payment_counts([4]) == "4 payments"
    assert format_payment_counts([1, 3]) == "1 or 3 payments"
    assert format_payment_counts([1, 3, 6]) == "1, 3, or 6 payments"


def test_fixed_monthly_headline_contains_amount(fixed_monthly_plan):
    summary = summarize_plan(fixed_monthly_plan)

    assert "$150.00" in summary.headline
    assert summary == PlanSummary(headline="$150.00 per month for 24 months")


def test_fixed_monthly_until_paid():
    summary = summarize_plan(plan_with(FixedMonthlyTerms(fixed_monthly_payment_cents=15000)))
    assert summary.headline == "$150.00 per month until paid in full"


def test_range_headlines():
    assert (
        summarize_plan(plan_with(RangeTerms(10000, 25000, 12))).headline
        == "$100.00 - $250.00 per month for up to 12 months"
    )
    assert (
        summarize_plan(plan_with(RangeTerms(monthly_payment_min_cents=5000))).headline
        == "As low as $50.00/month until paid in full"
    )
    assert (
        summarize_plan(plan_with(RangeTerms(monthly_payment_max_cents=25000, max_term_months=1))).headline
        == "Up to $250.00 per month for up to 1 month"
    )
    assert summarize_plan(plan_with(RangeTerms())).headline == "Flexible monthly payments until paid in full"
    assert summarize_plan(plan_with(RangeTerms(10000, 25000, 12))).detail is None


def test_settlement_summary(settlement_plan):
    summary = summarize_plan(settlement_plan)

    assert summary.headline == "Settle for 60% of balance in 1, 3, or 6 payments, paid monthly"
    assert summary.detail == "Monthly payments • Offer expires Mar 1, 2025"


def test_settlement_detail_includes_terms_text():
    terms = SettlementTerms(
        payoff_percentage_basis_points=4550,
        payment_counts=(2,),
        payment_frequency=PaymentFrequency.BIWEEKLY,
        terms_text="Offer void if a payment is missed",
    )
    summary = summarize_plan(plan_with(terms))

    assert summary.headline == "Settle for 45.5% of balance in 2 payments, paid every two weeks"
    assert summary.detail == "Biweekly payments • Offer void if a payment is missed"


def test_custom_terms_returns_full_text():
    text = "Call our office " * 50
    summary = summarize_plan(plan_with(CustomTerms(custom_terms_text=text)))

    assert summary.headline == "Custom terms"
    assert summary.detail == text


def test_one_time_payment_headline():
    summary = summarize_plan(plan_with(OneTimePaymentTerms(minimum_payment_cents=50000)))
    assert summary == PlanSummary(headline="One-time payment of at least $500.00")


def test_pay_in_full_summary():
    summary = summarize_plan(plan_with(PayInFullTerms(8000, date(2025, 3, 1))))
    assert summary == PlanSummary(headline="Pay 80% of balance by Mar 1, 2025", detail=None)

    with_terms = summarize_plan(plan_with(PayInFullTerms(8000, date(2025, 3, 1), "Certified funds only")))
    assert with_terms.detail == "Certified funds only"


def test_summary_is_deterministic(settlement_plan):
    """Test repeated calls give identical text (nothing depends on today's date)"""
    first = summarize_plan(settlement_plan)
    second = summarize_plan(settlement_plan)

    assert first == second
    assert first.headline.encode() == second.headline.encode()
    assert first.detail.encode() == second.detail.encode()


def test_plan_type_labels():
    assert plan_type_label(PlanType.FIXED_MONTHLY) == "Fixed monthly"
    assert plan_type_label(PlanType.ONE_TIME_PAYMENT) == "One-time payment"
    assert all(plan_type_label(plan_type) for plan_type in PlanType)
