"""
Lead campaigns router: CRUD, lifecycle, assignees and lead ingestion.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..context import CallerContext
from ..dependencies import get_caller_context, get_campaign_store, get_import_pipeline
from ..exceptions import CampaignEngineError
from ..models.campaign import AssigneeRole
from ..schemas.campaign import (
    CampaignCreate,
    CampaignFilter,
    CampaignResponse,
    CampaignStatsSummary,
    CampaignUpdate,
    StatusEventRequest,
    TeamMemberResponse,
)
from ..schemas.csv_import import ImportResult
from ..schemas.lead import BulkLeadsRequest, LeadResponse, ManualLeadEntry
from ..services.campaign_aggregate import CampaignAggregate
from ..services.protocols import CampaignStoreProtocol
from ..services.import_pipeline import ImportPipeline
from .errors import http_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/lead-campaigns", tags=["lead-campaigns"])


class PercentageUpdate(BaseModel):
    percentage: int = Field(..., description="Clamped to 0..100")


class AssigneeToggle(BaseModel):
    role: AssigneeRole = AssigneeRole.MEMBER


class EventCampaignsResponse(BaseModel):
    campaigns: List[CampaignResponse]
    leads: List[LeadResponse]
    total_leads: int


@router.get("/", response_model=List[CampaignResponse])
async def list_campaigns(
    status_filter: Optional[str] = Query(None, alias="status"),
    method: Optional[str] = None,
    search: Optional[str] = None,
    event_ref: Optional[str] = None,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """List campaigns of the caller's company, newest first."""
    filters = CampaignFilter(
        status=status_filter, method=method, search_text=search, external_event_ref=event_ref
    )
    return await store.list_campaigns(context, filters)


@router.get("/stats/summary", response_model=CampaignStatsSummary)
async def get_campaign_stats(
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Campaign counters for the caller's company."""
    return await store.get_campaign_stats(context)


# NOTE: These routes MUST come BEFORE /{campaign_id}
@router.get("/team/members", response_model=List[TeamMemberResponse])
async def list_team_members(
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Members that can be assigned to campaigns."""
    return await store.list_team_members(context)


@router.get("/by-event/{event_ref}", response_model=EventCampaignsResponse)
async def list_campaigns_by_event(
    event_ref: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Campaigns linked to an external event, with all of their leads."""
    campaigns, leads = await store.list_campaigns_by_event(context, event_ref)
    return EventCampaignsResponse(campaigns=campaigns, leads=leads, total_leads=len(leads))


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    try:
        return await store.get_campaign(context, campaign_id)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    draft: CampaignCreate,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Create a draft campaign owned by the caller."""
    return await store.create_campaign(context, draft)


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: str,
    update: CampaignUpdate,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Update a campaign; structural fields only while draft or paused."""
    try:
        return await store.update_campaign(context, campaign_id, update)
    except CampaignEngineError as e:
        raise http_error(e)


@router.delete("/{campaign_id}")
async def delete_campaign(
    campaign_id: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    try:
        await store.delete_campaign(context, campaign_id)
    except CampaignEngineError as e:
        raise http_error(e)
    return {"message": "Campaign deleted successfully"}


@router.patch("/{campaign_id}/status", response_model=CampaignResponse)
async def set_campaign_status(
    campaign_id: str,
    request: StatusEventRequest,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Apply a lifecycle event (publish, pause, resume, complete, archive)."""
    try:
        return await store.set_campaign_status(context, campaign_id, request.event)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/{campaign_id}/duplicate", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_campaign(
    campaign_id: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Copy the configuration into a new draft, without leads or stats."""
    try:
        return await store.duplicate_campaign(context, campaign_id)
    except CampaignEngineError as e:
        raise http_error(e)


# ===== ASSIGNEES =====

async def _save_assignees(
    store: CampaignStoreProtocol,
    context: CallerContext,
    aggregate: CampaignAggregate,
) -> CampaignResponse:
    return await store.update_campaign(
        context, aggregate.id, CampaignUpdate(assignees=aggregate.assignees)
    )


@router.post("/{campaign_id}/assignees/distribute", response_model=CampaignResponse)
async def distribute_assignees(
    campaign_id: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Split the workload equally between the current assignees."""
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        aggregate.auto_distribute()
        return await _save_assignees(store, context, aggregate)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/{campaign_id}/assignees/{user_ref}/toggle", response_model=CampaignResponse)
async def toggle_assignee(
    campaign_id: str,
    user_ref: str,
    request: AssigneeToggle = AssigneeToggle(),
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Add or remove an assignee; shares are redistributed."""
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        if any(a.user_ref == user_ref for a in aggregate.assignees):
            aggregate.remove_assignee(user_ref)
        else:
            aggregate.add_assignee(user_ref, request.role)
        return await _save_assignees(store, context, aggregate)
    except CampaignEngineError as e:
        raise http_error(e)


@router.put("/{campaign_id}/assignees/{user_ref}/percentage", response_model=CampaignResponse)
async def set_assignee_percentage(
    campaign_id: str,
    user_ref: str,
    request: PercentageUpdate,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """Manual share override; the response reports any imbalance."""
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        if not any(a.user_ref == user_ref for a in aggregate.assignees):
            raise HTTPException(status_code=404, detail="Assignee not found")
        aggregate.set_assignee_percentage(user_ref, request.percentage)
        return await _save_assignees(store, context, aggregate)
    except CampaignEngineError as e:
        raise http_error(e)


# ===== LEADS =====

@router.get("/{campaign_id}/leads", response_model=List[LeadResponse])
async def list_campaign_leads(
    campaign_id: str,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    try:
        return await store.list_leads(context, campaign_id)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/{campaign_id}/leads", response_model=ImportResult)
async def add_leads(
    campaign_id: str,
    request: BulkLeadsRequest,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
):
    """Ingest already-extracted records (scrape, third-party sync)."""
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        aggregate.ensure_manageable(context)
        return await pipeline.import_batch(aggregate, request.leads, batch_size=request.batch_size)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/{campaign_id}/leads/manual", response_model=ImportResult)
async def add_manual_lead(
    campaign_id: str,
    entry: ManualLeadEntry,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
):
    """Add one typed-in lead."""
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        aggregate.ensure_manageable(context)
        return await pipeline.add_manual_lead(aggregate, entry)
    except CampaignEngineError as e:
        raise http_error(e)
