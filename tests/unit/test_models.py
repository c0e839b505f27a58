"""Unit tests for plan term invariants"""

import pytest
from datetime import date
from arrangement_gateway.domain.exceptions import InvalidPlanTermsError
from arrangement_gateway.domain.models import (
    CustomTerms,
    FixedMonthlyTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
    PaymentFrequency,
    RangeTerms,
    SettlementTerms,
)


@pytest.mark.parametrize(
    "build",
    [
        lambda: RangeTerms(monthly_payment_min_cents=-1),
        lambda: RangeTerms(30000, 20000),
        lambda: RangeTerms(max_term_months=0),
        lambda: FixedMonthlyTerms(fixed_monthly_payment_cents=0),
        lambda: FixedMonthlyTerms(15000, max_term_months=-6),
        lambda: SettlementTerms(20000, (1, 3), PaymentFrequency.MONTHLY),
        lambda: SettlementTerms(0, (1,), PaymentFrequency.MONTHLY),
        lambda: SettlementTerms(6000, (), PaymentFrequency.MONTHLY),
        lambda: SettlementTerms(6000, (1, 0), PaymentFrequency.MONTHLY),
        lambda: CustomTerms("   "),
        lambda: OneTimePaymentTerms(0),
        lambda: PayInFullTerms(10001, date(2025, 3, 1)),
    ],
)
def test_terms_refuse_values_that_break_invariants(build):
    with pytest.raises(InvalidPlanTermsError):
        build()


def test_boundary_terms_are_allowed():
    """Test zero range amounts, 100% payoff and single-month terms are valid"""
    assert RangeTerms(0, 0, 1).monthly_payment_max_cents == 0
    assert SettlementTerms(10000, (1,), PaymentFrequency.WEEKLY).payoff_percentage_basis_points == 10000
    assert PayInFullTerms(1, date(2025, 3, 1)).payoff_percentage_basis_points == 1
