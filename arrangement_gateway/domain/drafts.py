"""
Plan drafts - the staged, not-yet-saved state of the plan form.

A draft holds the raw strings the admin typed. Edits produce new drafts
instead of mutating a shared settings object, and nothing reaches the
arrangement options API until the draft is committed.
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arrangement_gateway.domain.exceptions import UnknownPlanTypeError
from arrangement_gateway.domain.models import (
    ArrangementPlan,
    CustomTerms,
    FixedMonthlyTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
    RangeTerms,
    SettlementTerms,
)
from arrangement_gateway.domain.parsing import UNTIL_PAID, parse_draft
from arrangement_gateway.domain.validation import Rejection, validate_fields


class PlanDraft(BaseModel):
    """Raw plan form input, keyed the way the admin form posts it"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    description: str = ""
    balance_tier: str = Field("", alias="balanceTier")
    plan_type: str = Field("range", alias="planType")
    monthly_payment_min: str = Field("", alias="monthlyPaymentMin")
    monthly_payment_max: str = Field("", alias="monthlyPaymentMax")
    max_term_months: str = Field("", alias="maxTermMonths")
    fixed_monthly_payment: str = Field("", alias="fixedMonthlyPayment")
    payoff_percentage: str = Field("", alias="payoffPercentage")
    settlement_payment_counts: str = Field("", alias="settlementPaymentCounts")
    settlement_payment_frequency: str = Field("", alias="settlementPaymentFrequency")
    settlement_offer_expires_date: str = Field("", alias="settlementOfferExpiresDate")
    terms_text: str = Field("", alias="termsText")
    custom_terms_text: str = Field("", alias="customTermsText")
    minimum_payment: str = Field("", alias="minimumPayment")
    due_date: str = Field("", alias="dueDate")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> str:
        # Form libraries hand over numbers and nulls as often as strings
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return str(value)

    def with_changes(self, **changes: str) -> "PlanDraft":
        """Return a copy of this draft with some fields replaced"""
        return self.model_validate({**self.model_dump(), **changes})

    def has_unsaved_changes(self, baseline: "PlanDraft") -> bool:
        return self != baseline


def commit_draft(draft: PlanDraft) -> Union[ArrangementPlan, Rejection]:
    """Parse and validate a draft; the plan is only built if every rule passes"""
    return validate_fields(draft.plan_type, parse_draft(draft))


def _money(cents: int | None) -> str:
    if cents is None:
        return ""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}{dollars}.{remainder:02d}"


def _percentage(basis_points: int) -> str:
    whole, remainder = divmod(basis_points, 100)
    return f"{whole}.{remainder:02d}" if remainder else str(whole)


def _term(months: int | None) -> str:
    return UNTIL_PAID if months is None else str(months)


def draft_from_plan(plan: ArrangementPlan) -> PlanDraft:
    """
    Pre-fill a draft from an existing plan.

    Plans are never patched in place; editing one means committing this
    draft as a new plan and deleting the old one.
    """
    fields = {
        "name": plan.name,
        "description": plan.description or "",
        "balance_tier": plan.balance_tier.value,
        "plan_type": plan.plan_type.value,
    }

    terms = plan.terms
    if isinstance(terms, RangeTerms):
        fields.update(
            monthly_payment_min=_money(terms.monthly_payment_min_cents),
            monthly_payment_max=_money(terms.monthly_payment_max_cents),
            max_term_months=_term(terms.max_term_months),
        )
    elif isinstance(terms, FixedMonthlyTerms):
        fields.update(
            fixed_monthly_payment=_money(terms.fixed_monthly_payment_cents),
            max_term_months=_term(terms.max_term_months),
        )
    elif isinstance(terms, SettlementTerms):
        fields.update(
            payoff_percentage=_percentage(terms.payoff_percentage_basis_points),
            settlement_payment_counts=",".join(str(count) for count in terms.payment_counts),
            settlement_payment_frequency=terms.payment_frequency.value,
            settlement_offer_expires_date=(
                terms.offer_expires_date.isoformat() if terms.offer_expires_date else ""
            ),
            terms_text=terms.terms_text or "",
        )
    elif isinstance(terms, CustomTerms):
        fields.update(custom_terms_text=terms.custom_terms_text)
    elif isinstance(terms, OneTimePaymentTerms):
        fields.update(minimum_payment=_money(terms.minimum_payment_cents))
    elif isinstance(terms, PayInFullTerms):
        fields.update(
            payoff_percentage=_percentage(terms.payoff_percentage_basis_points),
            due_date=terms.due_date.isoformat(),
            terms_text=terms.terms_text or "",
        )
    else:
        raise UnknownPlanTypeError(plan.plan_type)

    return PlanDraft(**fields)
