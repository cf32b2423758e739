"""
HTTP client for a remote persistence API that owns campaigns and leads.

Used when the engine is embedded next to a separate lead service instead of
the local SQLAlchemy store. Timeouts and error responses surface as
BatchSubmissionFailed, which the import pipeline counts per batch.
"""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..exceptions import BatchSubmissionFailed
from ..schemas.lead import CreateLeadsResult, LeadCandidate

logger = logging.getLogger(__name__)


class RemoteLeadSubmitter:
    """Submits lead batches to POST {base_url}/campaigns/{id}/leads."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.persistence_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.persistence_timeout_seconds
        self.headers = {"Content-Type": "application/json"}
        api_key = api_key if api_key is not None else settings.persistence_api_key
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def create_leads(self, campaign_id: str, candidates: List[LeadCandidate]) -> CreateLeadsResult:
        """
        Submit one batch.

        Args:
            campaign_id: Target campaign
            candidates: Normalized, identifiable candidates

        Returns:
            Counts for the batch and the refreshed campaign
        """
        payload = {"leads": [c.model_dump() for c in candidates]}

        try:
            async with self._client() as client:
                response = await client.post(f"/campaigns/{campaign_id}/leads", json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Lead submission timeout for campaign {campaign_id}")
            raise BatchSubmissionFailed(len(candidates), e) from e
        except httpx.HTTPError as e:
            logger.error(f"Lead submission error for campaign {campaign_id}: {e}")
            raise BatchSubmissionFailed(len(candidates), e) from e

        if response.status_code not in (200, 201):
            logger.error(
                f"Lead submission failed: {response.status_code} - {response.text}"
            )
            raise BatchSubmissionFailed(
                len(candidates), RuntimeError(f"HTTP {response.status_code}: {response.text}")
            )

        try:
            return CreateLeadsResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BatchSubmissionFailed(len(candidates), e) from e
