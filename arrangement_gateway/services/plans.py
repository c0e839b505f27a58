"""Plan service - takes admin drafts through validation to the arrangement options API"""

import logging
import time
from dataclasses import dataclass
from typing import List

from arrangement_gateway.domain.drafts import PlanDraft, commit_draft
from arrangement_gateway.domain.exceptions import InvalidPlanRecordError, PlanNotFoundError, TenantMismatchError
from arrangement_gateway.domain.models import PlanSummary, StoredPlan
from arrangement_gateway.domain.summary import plan_type_label, summarize_plan
from arrangement_gateway.domain.tiers import tier_for_balance
from arrangement_gateway.domain.validation import Rejection
from arrangement_gateway.infrastructure.clients.arrangements import ArrangementsClient
from arrangement_gateway.infrastructure.clients.schemas import CreatePlanRequest, StoredPlanRecord
from arrangement_gateway.infrastructure.observability.logging import log_submission
from arrangement_gateway.infrastructure.observability.metrics import record_submission

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of submitting a draft: a stored plan or the reason it was refused"""

    accepted: bool
    stored_plan: StoredPlan | None = None
    rejection: Rejection | None = None


@dataclass
class PlanListing:
    """Stored plan with the text shown for it"""

    stored_plan: StoredPlan
    label: str
    summary: PlanSummary


def ensure_tenant_ownership(stored_plan: StoredPlan, tenant_id: str) -> None:
    """Raise if a plan read back from the API belongs to another agency"""
    if stored_plan.tenant_id is not None and stored_plan.tenant_id != tenant_id:
        raise TenantMismatchError(f"Plan {stored_plan.id} does not belong to tenant {tenant_id}")


def _to_listing(stored_plan: StoredPlan) -> PlanListing:
    return PlanListing(
        stored_plan=stored_plan,
        label=plan_type_label(stored_plan.plan.plan_type),
        summary=summarize_plan(stored_plan.plan),
    )


class PlanService:
    """Arrangement plan operations for one agency's admin console"""

    def __init__(self, client: ArrangementsClient):
        self.client = client

    def _owned(self, tenant_id: str, record: StoredPlanRecord) -> StoredPlan:
        stored_plan = record.to_domain()
        ensure_tenant_ownership(stored_plan, tenant_id)
        return stored_plan

    async def submit(self, tenant_id: str, draft: PlanDraft) -> SubmissionResult:
        """
        Validate a draft and, if it passes, store it as a new plan.

        Flow:
        1. Parse and validate the draft
        2. On rejection, return the reason without calling the API
        3. Build the create payload (balance bounds from the tier)
        4. Store it and read the persisted plan back

        A stored record that cannot be read back is deleted before the
        error propagates, so a failed submit never leaves a plan behind.

        Raises:
            UnknownPlanTypeError: draft.plan_type is not a known variant
            ArrangementsAPIError: The API failed while storing the plan
            InvalidPlanRecordError: The API echoed back an invalid record
            TenantMismatchError: The API stored the plan under another tenant
        """
        start_time = time.time()
        result = commit_draft(draft)

        if isinstance(result, Rejection):
            duration_ms = (time.time() - start_time) * 1000
            record_submission(draft.plan_type, accepted=False, reason=result.reason)
            log_submission(
                tenant_id,
                draft.plan_type,
                accepted=False,
                duration_ms=duration_ms,
                rejection_reason=result.reason.value,
                rejected_field=result.field,
            )
            return SubmissionResult(accepted=False, rejection=result)

        record = await self.client.create_plan(CreatePlanRequest.from_plan(result))
        try:
            stored_plan = self._owned(tenant_id, record)
        except (InvalidPlanRecordError, TenantMismatchError):
            # The echoed record is unusable, so the plan is removed again
            logger.error(
                "Stored plan failed read-back, deleting it",
                extra={"tenant_id": tenant_id, "plan_id": record.id},
            )
            await self.client.delete_plan(record.id)
            raise

        duration_ms = (time.time() - start_time) * 1000
        record_submission(result.plan_type.value, accepted=True)
        log_submission(
            tenant_id,
            result.plan_type.value,
            accepted=True,
            duration_ms=duration_ms,
            plan_id=stored_plan.id,
        )
        return SubmissionResult(accepted=True, stored_plan=stored_plan)

    async def list_plans(self, tenant_id: str) -> List[PlanListing]:
        records = await self.client.list_plans()
        return [_to_listing(self._owned(tenant_id, record)) for record in records]

    async def get_plan(self, tenant_id: str, plan_id: str) -> PlanListing | None:
        record = await self.client.get_plan(plan_id)
        if record is None:
            return None
        return _to_listing(self._owned(tenant_id, record))

    async def eligible_plans(self, tenant_id: str, balance_cents: int) -> List[PlanListing]:
        """Active plans a consumer with this balance may choose from"""
        tier = tier_for_balance(balance_cents)
        return [
            listing
            for listing in await self.list_plans(tenant_id)
            if listing.stored_plan.is_active and listing.stored_plan.plan.balance_tier == tier
        ]

    async def delete_plan(self, tenant_id: str, plan_id: str) -> None:
        """
        Raises:
            PlanNotFoundError: No plan with this id
            TenantMismatchError: Plan belongs to another tenant
        """
        record = await self.client.get_plan(plan_id)
        if record is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        self._owned(tenant_id, record)

        if not await self.client.delete_plan(plan_id):
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        logger.info("Plan deleted", extra={"tenant_id": tenant_id, "plan_id": plan_id})

    async def replace_plan(self, tenant_id: str, plan_id: str, draft: PlanDraft) -> SubmissionResult:
        """
        Edit a plan. Stored plans are immutable, so the edited draft is stored
        as a new plan and the old one deleted; a rejected draft leaves the old
        plan in place.
        """
        record = await self.client.get_plan(plan_id)
        if record is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        self._owned(tenant_id, record)

        result = await self.submit(tenant_id, draft)
        if not result.accepted:
            return result

        await self.client.delete_plan(plan_id)
        logger.info(
            "Plan replaced",
            extra={"tenant_id": tenant_id, "plan_id": plan_id, "new_plan_id": result.stored_plan.id},
        )
        return result
