"""Pydantic schemas for the arrangement options API request/response payloads"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from arrangement_gateway.domain.exceptions import InvalidPlanRecordError
from arrangement_gateway.domain.models import (
    ArrangementPlan,
    CustomTerms,
    FixedMonthlyTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
    PaymentFrequency,
    PlanType,
    RangeTerms,
    SettlementTerms,
    StoredPlan,
)
from arrangement_gateway.domain.parsing import ParsedFields, parse_payment_counts
from arrangement_gateway.domain.tiers import BalanceTier, range_for_tier, tier_for_balance
from arrangement_gateway.domain.validation import Rejection, validate_fields


class CreatePlanRequest(BaseModel):
    """Request body for POST /api/arrangement-options"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    balance_tier: BalanceTier = Field(..., alias="balanceTier")
    min_balance: int = Field(..., ge=0, alias="minBalance", description="Inclusive lower bound in cents")
    max_balance: Optional[int] = Field(None, alias="maxBalance", description="Exclusive upper bound in cents, null = unbounded")
    plan_type: PlanType = Field(..., alias="planType")

    monthly_payment_min_cents: Optional[int] = Field(None, alias="monthlyPaymentMinCents")
    monthly_payment_max_cents: Optional[int] = Field(None, alias="monthlyPaymentMaxCents")
    max_term_months: Optional[int] = Field(None, alias="maxTermMonths")
    fixed_monthly_payment_cents: Optional[int] = Field(None, alias="fixedMonthlyPaymentCents")
    payoff_percentage_basis_points: Optional[int] = Field(None, alias="payoffPercentageBasisPoints")
    payment_counts: Optional[List[int]] = Field(None, alias="paymentCounts")
    payment_frequency: Optional[PaymentFrequency] = Field(None, alias="paymentFrequency")
    offer_expires_date: Optional[date] = Field(None, alias="offerExpiresDate")
    terms_text: Optional[str] = Field(None, alias="termsText")
    custom_terms_text: Optional[str] = Field(None, alias="customTermsText")
    minimum_payment_cents: Optional[int] = Field(None, alias="minimumPaymentCents")
    due_date: Optional[date] = Field(None, alias="dueDate")

    @classmethod
    def from_plan(cls, plan: ArrangementPlan) -> "CreatePlanRequest":
        """Build the request for a validated plan; balance bounds always come from its tier"""
        min_balance, max_balance = range_for_tier(plan.balance_tier)
        fields: Dict[str, Any] = {
            "name": plan.name,
            "balance_tier": plan.balance_tier,
            "min_balance": min_balance,
            "max_balance": max_balance,
            "plan_type": plan.plan_type,
        }
        if plan.description is not None:
            fields["description"] = plan.description

        terms = plan.terms
        if isinstance(terms, RangeTerms):
            # Null minimum is meaningful (tenant default applies), so it is always sent
            fields.update(
                monthly_payment_min_cents=terms.monthly_payment_min_cents,
                monthly_payment_max_cents=terms.monthly_payment_max_cents,
                max_term_months=terms.max_term_months,
            )
        elif isinstance(terms, FixedMonthlyTerms):
            fields.update(
                fixed_monthly_payment_cents=terms.fixed_monthly_payment_cents,
                max_term_months=terms.max_term_months,
            )
        elif isinstance(terms, SettlementTerms):
            fields.update(
                payoff_percentage_basis_points=terms.payoff_percentage_basis_points,
                payment_counts=list(terms.payment_counts),
                payment_frequency=terms.payment_frequency,
                offer_expires_date=terms.offer_expires_date,
                terms_text=terms.terms_text,
            )
        elif isinstance(terms, CustomTerms):
            fields.update(custom_terms_text=terms.custom_terms_text)
        elif isinstance(terms, OneTimePaymentTerms):
            fields.update(minimum_payment_cents=terms.minimum_payment_cents)
        elif isinstance(terms, PayInFullTerms):
            fields.update(
                payoff_percentage_basis_points=terms.payoff_percentage_basis_points,
                due_date=terms.due_date,
                terms_text=terms.terms_text,
            )

        return cls(**fields)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body with only the keys that belong to this plan type"""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class StoredPlanRecord(BaseModel):
    """
    Plan as returned by GET /api/arrangement-options.

    Also reads rows written before plans were tiered and list based:
    legacy column names, a single settlementPaymentCount, missing
    planType/balanceTier and a zero maxTermMonths.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    name: str = ""
    description: Optional[str] = None
    balance_tier: Optional[str] = Field(None, alias="balanceTier")
    min_balance: Optional[int] = Field(None, alias="minBalance")
    max_balance: Optional[int] = Field(None, alias="maxBalance")
    plan_type: Optional[str] = Field(None, alias="planType")
    is_active: Optional[bool] = Field(None, alias="isActive")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    monthly_payment_min_cents: Optional[int] = Field(
        None, validation_alias=AliasChoices("monthlyPaymentMinCents", "monthlyPaymentMin")
    )
    monthly_payment_max_cents: Optional[int] = Field(
        None, validation_alias=AliasChoices("monthlyPaymentMaxCents", "monthlyPaymentMax")
    )
    max_term_months: Optional[int] = Field(None, alias="maxTermMonths")
    fixed_monthly_payment_cents: Optional[int] = Field(
        None, validation_alias=AliasChoices("fixedMonthlyPaymentCents", "fixedMonthlyPayment")
    )
    payoff_percentage_basis_points: Optional[int] = Field(None, alias="payoffPercentageBasisPoints")
    payment_counts: List[int] = Field(
        default_factory=list, validation_alias=AliasChoices("paymentCounts", "settlementPaymentCounts")
    )
    payment_frequency: Optional[str] = Field(
        None, validation_alias=AliasChoices("paymentFrequency", "settlementPaymentFrequency")
    )
    offer_expires_date: Optional[date] = Field(
        None, validation_alias=AliasChoices("offerExpiresDate", "settlementOfferExpiresDate")
    )
    terms_text: Optional[str] = Field(None, validation_alias=AliasChoices("termsText", "payoffText"))
    custom_terms_text: Optional[str] = Field(None, alias="customTermsText")
    minimum_payment_cents: Optional[int] = Field(
        None, validation_alias=AliasChoices("minimumPaymentCents", "oneTimePaymentMin")
    )
    due_date: Optional[date] = Field(None, validation_alias=AliasChoices("dueDate", "payoffDueDate"))

    @model_validator(mode="before")
    @classmethod
    def _upgrade_single_payment_count(cls, data: Any) -> Any:
        # Older settlement rows stored one count instead of a list of options
        if not isinstance(data, dict):
            return data
        legacy_count = data.get("settlementPaymentCount")
        has_counts = data.get("paymentCounts") or data.get("settlementPaymentCounts")
        if legacy_count and not has_counts:
            data = {**data, "paymentCounts": [legacy_count]}
        return data

    @field_validator("payment_counts", mode="before")
    @classmethod
    def _split_payment_counts(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return parse_payment_counts(value)
        return value

    @field_validator("max_term_months", mode="after")
    @classmethod
    def _non_positive_term_is_unbounded(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            return None
        return value

    def _resolve_tier(self) -> BalanceTier:
        if self.balance_tier:
            try:
                return BalanceTier(self.balance_tier)
            except ValueError:
                raise InvalidPlanRecordError(
                    f"Plan {self.id} has unknown balance tier {self.balance_tier!r}"
                ) from None

        if self.min_balance is None:
            raise InvalidPlanRecordError(f"Plan {self.id} has neither balanceTier nor minBalance")

        for tier in BalanceTier:
            if range_for_tier(tier)[0] == self.min_balance:
                return tier
        return tier_for_balance(self.min_balance)

    def to_domain(self) -> StoredPlan:
        """
        Rebuild the plan variant from the flat record.

        The record goes through the same rules as a new submission, so a
        stored plan is never handed to the summary generator unless it is
        valid.

        Raises:
            InvalidPlanRecordError: Record is missing fields its plan type requires
            UnknownPlanTypeError: planType is not a known variant
        """
        fields = ParsedFields(
            name=self.name.strip(),
            description=self.description,
            balance_tier=self._resolve_tier().value,
            monthly_payment_min_cents=self.monthly_payment_min_cents,
            monthly_payment_max_cents=self.monthly_payment_max_cents,
            max_term_months=self.max_term_months,
            fixed_monthly_payment_cents=self.fixed_monthly_payment_cents,
            payoff_percentage_basis_points=self.payoff_percentage_basis_points,
            payment_counts=[count for count in self.payment_counts if count > 0],
            payment_frequency=self.payment_frequency,
            offer_expires_date=self.offer_expires_date,
            terms_text=(self.terms_text or "").strip() or None,
            custom_terms_text=(self.custom_terms_text or "").strip() or None,
            minimum_payment_cents=self.minimum_payment_cents,
            due_date=self.due_date,
        )

        plan_type = self.plan_type or PlanType.RANGE.value
        result = validate_fields(plan_type, fields)
        if isinstance(result, Rejection):
            raise InvalidPlanRecordError(f"Plan {self.id} is not a valid {plan_type} plan: {result.message}")

        return StoredPlan(
            id=self.id,
            tenant_id=self.tenant_id,
            plan=result,
            created_at=self.created_at,
            is_active=self.is_active is not False,
        )
