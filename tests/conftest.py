"""Pytest fixtures for testing"""

import httpx
import pytest
from datetime import date
from typing import Callable
from fastapi import FastAPI

from arrangement_gateway.domain.drafts import PlanDraft
from arrangement_gateway.domain.models import (
    ArrangementPlan,
    FixedMonthlyTerms,
    PaymentFrequency,
    SettlementTerms,
)
from arrangement_gateway.domain.tiers import BalanceTier
from arrangement_gateway.infrastructure.clients.arrangements import ArrangementsClient
from arrangement_gateway.services.plans import PlanService
from stubs.arrangements_server.main import create_app

TENANT_ID = "tenant-1"
OTHER_TENANT_ID = "tenant-2"


@pytest.fixture
def stub_api() -> FastAPI:
    """Fresh in-memory arrangement options API per test"""
    return create_app()


@pytest.fixture
def client_for(stub_api: FastAPI) -> Callable[[str], ArrangementsClient]:
    """Build a client that talks to the stub API as the given tenant"""

    def make_client(tenant_id: str) -> ArrangementsClient:
        return ArrangementsClient(
            base_url="http://testserver",
            token=tenant_id,
            transport=httpx.ASGITransport(app=stub_api),
        )

    return make_client


@pytest.fixture
def arrangements_client(client_for: Callable[[str], ArrangementsClient]) -> ArrangementsClient:
    return client_for(TENANT_ID)


@pytest.fixture
def plan_service(arrangements_client: ArrangementsClient) -> PlanService:
    return PlanService(arrangements_client)


@pytest.fixture
def settlement_draft() -> PlanDraft:
    """Settlement form as the admin console posts it"""
    return PlanDraft.model_validate(
        {
            "name": "Short Settlement",
            "balanceTier": "3000_to_5000",
            "planType": "settlement",
            "payoffPercentage": "60",
            "settlementPaymentCounts": "1,3",
            "settlementPaymentFrequency": "monthly",
        }
    )


@pytest.fixture
def range_draft() -> PlanDraft:
    return PlanDraft(
        name="Standard Plan",
        balance_tier="under_3000",
        plan_type="range",
        monthly_payment_min="100",
        monthly_payment_max="250",
        max_term_months="12",
    )


@pytest.fixture
def fixed_monthly_plan() -> ArrangementPlan:
    return ArrangementPlan(
        name="Fixed $150",
        balance_tier=BalanceTier.FROM_5000_TO_10000,
        terms=FixedMonthlyTerms(fixed_monthly_payment_cents=15000, max_term_months=24),
    )


@pytest.fixture
def settlement_plan() -> ArrangementPlan:
    return ArrangementPlan(
        name="Settlement 60",
        balance_tier=BalanceTier.OVER_10000,
        terms=SettlementTerms(
            payoff_percentage_basis_points=6000,
            payment_counts=(1, 3, 6),
            payment_frequency=PaymentFrequency.MONTHLY,
            offer_expires_date=date(2025, 3, 1),
        ),
        description="Limited-time offer",
    )
