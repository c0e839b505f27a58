"""Plan summaries - the headline and detail line consumers see for a plan"""

from typing import Sequence

from arrangement_gateway.domain.exceptions import UnknownPlanTypeError
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
from arrangement_gateway.utils.date_utils import format_display_date

DETAIL_SEPARATOR = " • "

_PLAN_TYPE_LABELS = {
    PlanType.RANGE: "Range",
    PlanType.FIXED_MONTHLY: "Fixed monthly",
    PlanType.SETTLEMENT: "Settlement",
    PlanType.CUSTOM_TERMS: "Custom terms",
    PlanType.ONE_TIME_PAYMENT: "One-time payment",
    PlanType.PAY_IN_FULL: "Pay in full",
}

_FREQUENCY_ADVERBS = {
    PaymentFrequency.WEEKLY: "weekly",
    PaymentFrequency.BIWEEKLY: "every two weeks",
    PaymentFrequency.MONTHLY: "monthly",
}

_FREQUENCY_DETAILS = {
    PaymentFrequency.WEEKLY: "Weekly payments",
    PaymentFrequency.BIWEEKLY: "Biweekly payments",
    PaymentFrequency.MONTHLY: "Monthly payments",
}


def plan_type_label(plan_type: PlanType) -> str:
    return _PLAN_TYPE_LABELS[plan_type]


def format_cents(cents: int) -> str:
    """Format integer cents as US dollars: 15000 -> '$150.00', 123456 -> '$1,234.56'"""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def format_basis_points(basis_points: int) -> str:
    """Format basis points as a percentage without trailing zeros: 6000 -> '60%', 6050 -> '60.5%'"""
    whole, remainder = divmod(basis_points, 100)
    if remainder == 0:
        return f"{whole}%"
    return f"{whole}.{remainder:02d}".rstrip("0") + "%"


def format_payment_counts(counts: Sequence[int]) -> str:
    """Format payment count options: [1] -> '1 payment', [1, 3] -> '1 or 3 payments', [1, 3, 6] -> '1, 3, or 6 payments'"""
    labels = [str(count) for count in counts]
    if len(labels) == 1:
        noun = "payment" if counts[0] == 1 else "payments"
        return f"{labels[0]} {noun}"
    if len(labels) == 2:
        return f"{labels[0]} or {labels[1]} payments"
    return f"{', '.join(labels[:-1])}, or {labels[-1]} payments"


def _term_phrase(max_term_months: int | None, prefix: str) -> str:
    if max_term_months is None:
        return "until paid in full"
    unit = "month" if max_term_months == 1 else "months"
    return f"{prefix} {max_term_months} {unit}"


def _summarize_range(terms: RangeTerms) -> PlanSummary:
    low = terms.monthly_payment_min_cents
    high = terms.monthly_payment_max_cents

    if low is not None and high is not None:
        window = f"{format_cents(low)} - {format_cents(high)} per month"
    elif low is not None:
        window = f"As low as {format_cents(low)}/month"
    elif high is not None:
        window = f"Up to {format_cents(high)} per month"
    else:
        window = "Flexible monthly payments"

    return PlanSummary(headline=f"{window} {_term_phrase(terms.max_term_months, 'for up to')}")


def _summarize_fixed_monthly(terms: FixedMonthlyTerms) -> PlanSummary:
    amount = format_cents(terms.fixed_monthly_payment_cents)
    return PlanSummary(headline=f"{amount} per month {_term_phrase(terms.max_term_months, 'for')}")


def _summarize_settlement(terms: SettlementTerms) -> PlanSummary:
    percentage = format_basis_points(terms.payoff_percentage_basis_points)
    options = format_payment_counts(terms.payment_counts)
    frequency = _FREQUENCY_ADVERBS[terms.payment_frequency]
    headline = f"Settle for {percentage} of balance in {options}, paid {frequency}"

    details = [_FREQUENCY_DETAILS[terms.payment_frequency]]
    if terms.offer_expires_date is not None:
        details.append(f"Offer expires {format_display_date(terms.offer_expires_date)}")
    if terms.terms_text:
        details.append(terms.terms_text)

    return PlanSummary(headline=headline, detail=DETAIL_SEPARATOR.join(details))


def _summarize_pay_in_full(terms: PayInFullTerms) -> PlanSummary:
    percentage = format_basis_points(terms.payoff_percentage_basis_points)
    return PlanSummary(
        headline=f"Pay {percentage} of balance by {format_display_date(terms.due_date)}",
        detail=terms.terms_text or None,
    )


def summarize_plan(plan: ArrangementPlan) -> PlanSummary:
    """
    Render a validated plan into consumer-facing text.

    Output depends only on the plan, so the same plan always produces the
    same summary. Long custom terms are returned whole; truncating them is
    up to the caller.
    """
    terms = plan.terms
    if isinstance(terms, RangeTerms):
        return _summarize_range(terms)
    if isinstance(terms, FixedMonthlyTerms):
        return _summarize_fixed_monthly(terms)
    if isinstance(terms, SettlementTerms):
        return _summarize_settlement(terms)
    if isinstance(terms, CustomTerms):
        return PlanSummary(headline="Custom terms", detail=terms.custom_terms_text)
    if isinstance(terms, OneTimePaymentTerms):
        return PlanSummary(headline=f"One-time payment of at least {format_cents(terms.minimum_payment_cents)}")
    if isinstance(terms, PayInFullTerms):
        return _summarize_pay_in_full(terms)
    raise UnknownPlanTypeError(type(terms).__name__)
