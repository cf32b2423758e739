"""
SQLAlchemy implementation of the campaign persistence boundary.

Reads are scoped to the caller's company. Structural edits and status changes
go through CampaignAggregate so the lifecycle rules are checked locally before
anything is written.
"""
import logging
import re
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..context import CallerContext
from ..exceptions import BatchSubmissionFailed, CampaignNotFound
from ..models import CampaignAssignee, Lead, LeadCampaign, LeadStatus, TeamMember
from ..models.campaign import AcquisitionMethod, CampaignStatus
from ..models.lead import STATUS_STATS_BUCKET
from ..schemas.campaign import (
    CampaignCreate,
    CampaignEvent,
    CampaignFilter,
    CampaignResponse,
    CampaignStats,
    CampaignStatsSummary,
    CampaignUpdate,
    TeamMemberResponse,
)
from ..schemas.lead import (
    CreateLeadsResult,
    CreateLeadsSummary,
    LeadCandidate,
    LeadErrorDetail,
    LeadResponse,
)
from .campaign_aggregate import CampaignAggregate, new_campaign_assignees
from .campaign_lifecycle import INITIAL_STATUS

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Scalar columns copied between CampaignResponse and LeadCampaign
CONFIG_FIELDS = (
    "name",
    "acquisition_method",
    "lead_category",
    "tags",
    "source_notes",
    "expected_count",
    "priority",
    "assignment_rule",
    "external_event_ref",
    "source_file_name",
)


def _is_all(value: Optional[str]) -> bool:
    return not value or value == "all"


def compute_stats(leads: List[Lead]) -> CampaignStats:
    """Count a campaign's leads per status bucket."""
    counts = CampaignStats(total=len(leads))
    for lead in leads:
        try:
            bucket = STATUS_STATS_BUCKET[LeadStatus(lead.status)]
        except ValueError:
            bucket = None
        if bucket:
            setattr(counts, bucket, getattr(counts, bucket) + 1)
        if lead.converted_to_client:
            counts.converted += 1
    return counts


class SqlCampaignStore:
    """Campaign, lead and team member persistence backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # ===== MAPPING =====

    def _to_response(self, campaign: LeadCampaign) -> CampaignResponse:
        response = CampaignResponse.model_validate(campaign)
        return CampaignAggregate(response).to_response()

    def _write_back(self, model: LeadCampaign, campaign: CampaignResponse) -> None:
        for field in CONFIG_FIELDS:
            value = getattr(campaign, field)
            if hasattr(value, "value"):
                value = value.value
            setattr(model, field, value)
        model.third_party_config = (
            campaign.third_party_config.model_dump(mode="json")
            if campaign.third_party_config else None
        )
        model.status = CampaignStatus(campaign.status).value
        model.assignees = [
            CampaignAssignee(
                user_ref=a.user_ref,
                role=a.role.value,
                percentage=a.percentage,
                position=position,
            )
            for position, a in enumerate(campaign.assignees)
        ]

    def _get_model(self, context: CallerContext, campaign_id: str) -> LeadCampaign:
        campaign = self.db.query(LeadCampaign).filter(
            LeadCampaign.id == campaign_id,
            LeadCampaign.company_id == context.company_id,
        ).first()
        if not campaign:
            raise CampaignNotFound(campaign_id)
        return campaign

    def _commit(self, model: LeadCampaign) -> CampaignResponse:
        self.db.commit()
        self.db.refresh(model)
        return self._to_response(model)

    # ===== CAMPAIGNS =====

    async def get_aggregate(self, context: CallerContext, campaign_id: str) -> CampaignAggregate:
        return CampaignAggregate(self._to_response(self._get_model(context, campaign_id)))

    async def get_campaign(self, context: CallerContext, campaign_id: str) -> CampaignResponse:
        return self._to_response(self._get_model(context, campaign_id))

    async def list_campaigns(
        self, context: CallerContext, filters: Optional[CampaignFilter] = None
    ) -> List[CampaignResponse]:
        """Campaigns of the caller's company, newest first."""
        filters = filters or CampaignFilter()
        query = self.db.query(LeadCampaign).filter(LeadCampaign.company_id == context.company_id)

        if not _is_all(filters.status):
            query = query.filter(LeadCampaign.status == filters.status)
        if not _is_all(filters.method):
            query = query.filter(LeadCampaign.acquisition_method == filters.method)
        if filters.external_event_ref:
            query = query.filter(LeadCampaign.external_event_ref == filters.external_event_ref)

        campaigns = query.order_by(desc(LeadCampaign.created_at)).all()

        if filters.search_text:
            needle = filters.search_text.lower()
            campaigns = [
                c for c in campaigns
                if needle in (c.name or "").lower()
                or needle in (c.lead_category or "").lower()
                or any(needle in tag.lower() for tag in (c.tags or []))
            ]

        return [self._to_response(c) for c in campaigns]

    async def get_campaign_stats(self, context: CallerContext) -> CampaignStatsSummary:
        campaigns = self.db.query(LeadCampaign).filter(
            LeadCampaign.company_id == context.company_id
        ).all()

        statuses = [c.status for c in campaigns]
        return CampaignStatsSummary(
            total=len(campaigns),
            active=statuses.count(CampaignStatus.ACTIVE.value),
            draft=statuses.count(CampaignStatus.DRAFT.value),
            completed=statuses.count(CampaignStatus.COMPLETED.value),
            total_leads=sum((c.stats or {}).get("total", 0) for c in campaigns),
            method_breakdown={
                method.value: sum(1 for c in campaigns if c.acquisition_method == method.value)
                for method in AcquisitionMethod
            },
        )

    async def create_campaign(self, context: CallerContext, draft: CampaignCreate) -> CampaignResponse:
        """New campaigns always start in draft with the creator as owner."""
        model = LeadCampaign(company_id=context.company_id, owner_id=context.user_id)
        response = CampaignResponse(
            **draft.model_dump(exclude={"assignees", "auto_distribute"}),
            id="",
            company_id=context.company_id,
            owner_id=context.user_id,
            status=INITIAL_STATUS,
            assignees=new_campaign_assignees(context.user_id, draft),
        )
        self._write_back(model, response)
        self.db.add(model)
        created = self._commit(model)
        logger.info(f"Created campaign {created.id} '{created.name}' for company {context.company_id}")
        return created

    async def update_campaign(
        self, context: CallerContext, campaign_id: str, update: CampaignUpdate
    ) -> CampaignResponse:
        model = self._get_model(context, campaign_id)
        aggregate = CampaignAggregate(self._to_response(model))
        aggregate.ensure_manageable(context)
        self._write_back(model, aggregate.apply_update(update))
        return self._commit(model)

    async def set_campaign_status(
        self, context: CallerContext, campaign_id: str, event: CampaignEvent
    ) -> CampaignResponse:
        model = self._get_model(context, campaign_id)
        aggregate = CampaignAggregate(self._to_response(model))
        aggregate.ensure_manageable(context)
        model.status = aggregate.apply_event(event).value
        return self._commit(model)

    async def duplicate_campaign(self, context: CallerContext, campaign_id: str) -> CampaignResponse:
        original = CampaignAggregate(self._to_response(self._get_model(context, campaign_id)))
        return await self.create_campaign(context, original.clone_configuration())

    async def delete_campaign(self, context: CallerContext, campaign_id: str) -> None:
        model = self._get_model(context, campaign_id)
        CampaignAggregate(self._to_response(model)).ensure_manageable(context)
        self.db.delete(model)
        self.db.commit()
        logger.info(f"Deleted campaign {campaign_id}")

    async def list_campaigns_by_event(
        self, context: CallerContext, event_ref: str
    ) -> Tuple[List[CampaignResponse], List[LeadResponse]]:
        """Campaigns linked to an external event plus all their leads."""
        campaigns = (
            self.db.query(LeadCampaign)
            .filter(
                LeadCampaign.company_id == context.company_id,
                LeadCampaign.external_event_ref == event_ref,
            )
            .order_by(desc(LeadCampaign.created_at))
            .all()
        )
        leads: List[LeadResponse] = []
        seen = set()
        for campaign in campaigns:
            for lead in campaign.leads:
                if lead.id not in seen:
                    seen.add(lead.id)
                    leads.append(LeadResponse.model_validate(lead))
        return [self._to_response(c) for c in campaigns], leads

    # ===== LEADS =====

    async def list_leads(self, context: CallerContext, campaign_id: str) -> List[LeadResponse]:
        model = self._get_model(context, campaign_id)
        return [LeadResponse.model_validate(lead) for lead in model.leads]

    def _add_candidate(
        self,
        campaign: LeadCampaign,
        candidate: LeadCandidate,
        errors: List[LeadErrorDetail],
    ) -> bool:
        email = candidate.email.strip().lower()
        if email and not EMAIL_PATTERN.match(email):
            errors.append(LeadErrorDetail(email=candidate.email, error="Invalid email address"))
            return False

        if email:
            existing = self.db.query(Lead).filter(
                Lead.company_id == campaign.company_id,
                Lead.email == email,
            ).first()
            if existing:
                # Link the existing lead instead of creating a copy
                if existing in campaign.leads:
                    errors.append(LeadErrorDetail(email=candidate.email, error="Already in campaign"))
                    return False
                campaign.leads.append(existing)
                return True

        lead = Lead(
            company_id=campaign.company_id,
            created_by=campaign.owner_id,
            client_name=candidate.client_name.strip(),
            company_name=candidate.company_name.strip(),
            email=email,
            phone=candidate.phone.strip(),
            designation=candidate.designation.strip(),
            location=candidate.location.strip(),
            requirements=candidate.requirements.strip(),
            social=candidate.social.model_dump(exclude_none=True),
            status=LeadStatus.COLD.value,
        )
        self.db.add(lead)
        campaign.leads.append(lead)
        self.db.flush()
        return True

    async def create_leads(self, campaign_id: str, candidates: List[LeadCandidate]) -> CreateLeadsResult:
        """Persist a batch, then recompute the campaign stats from its lead set."""
        campaign = self.db.query(LeadCampaign).filter(LeadCampaign.id == campaign_id).first()
        if not campaign:
            raise CampaignNotFound(campaign_id)

        created = 0
        errors: List[LeadErrorDetail] = []
        try:
            for candidate in candidates:
                if self._add_candidate(campaign, candidate, errors):
                    created += 1
            campaign.stats = compute_stats(campaign.leads).model_dump()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving leads for campaign {campaign_id}: {e}")
            raise BatchSubmissionFailed(len(candidates), e) from e

        self.db.refresh(campaign)
        return CreateLeadsResult(
            summary=CreateLeadsSummary(
                total=len(candidates),
                created=created,
                errors=len(errors),
                error_details=errors,
            ),
            campaign=self._to_response(campaign),
        )

    # ===== TEAM =====

    async def list_team_members(self, context: CallerContext) -> List[TeamMemberResponse]:
        members = (
            self.db.query(TeamMember)
            .filter(TeamMember.company_id == context.company_id)
            .order_by(TeamMember.display_name)
            .all()
        )
        return [TeamMemberResponse.model_validate(m) for m in members]
