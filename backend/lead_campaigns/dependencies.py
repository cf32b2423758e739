"""
FastAPI dependencies for the caller context and the campaign store.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .config import get_settings
from .context import CallerContext
from .database import get_db
from .services.campaign_store import SqlCampaignStore
from .services.import_pipeline import ImportPipeline
from .services.persistence_client import RemoteLeadSubmitter

logger = logging.getLogger(__name__)


async def get_caller_context(
    x_user_id: Optional[str] = Header(None),
    x_company_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> CallerContext:
    """
    Build the caller context from headers set by the upstream identity layer.

    Raises:
        HTTPException 401: If the user id header is missing
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )

    # Users without a company are their own scope
    return CallerContext(
        user_id=x_user_id,
        company_id=x_company_id or x_user_id,
        role=x_user_role or "member",
    )


def get_campaign_store(db: Session = Depends(get_db)) -> SqlCampaignStore:
    """Dependency to get the campaign store bound to the request session."""
    return SqlCampaignStore(db)


def get_import_pipeline(store: SqlCampaignStore = Depends(get_campaign_store)) -> ImportPipeline:
    """
    Dependency to get an import pipeline.

    Batches go to the remote persistence API when PERSISTENCE_API_URL is set,
    otherwise straight into the local store.
    """
    settings = get_settings()
    if settings.persistence_api_url:
        submitter = RemoteLeadSubmitter(
            base_url=settings.persistence_api_url,
            api_key=settings.persistence_api_key,
            timeout=settings.persistence_timeout_seconds,
        )
        logger.info(f"Submitting imported leads to {settings.persistence_api_url}")
        return ImportPipeline(submitter, batch_size=settings.import_batch_size)
    return ImportPipeline(store, batch_size=settings.import_batch_size)
