"""
Error taxonomy for the campaign engine.

Services raise these; routers translate them into HTTP errors.
"""
from typing import Iterable, Optional


class CampaignEngineError(Exception):
    """Base exception for campaign engine errors."""
    pass


class CampaignNotFound(CampaignEngineError):
    """Campaign does not exist in the caller's scope."""

    def __init__(self, campaign_id: str):
        self.campaign_id = campaign_id
        super().__init__(f"Campaign not found: {campaign_id}")


class InvalidTransition(CampaignEngineError):
    """Lifecycle event is not legal from the current status."""

    def __init__(self, status: str, event: str):
        self.status = status
        self.event = event
        super().__init__(f"Cannot apply '{event}' to a campaign in status '{status}'")


class CampaignNotIngestible(CampaignEngineError):
    """Ingestion attempted while the campaign is completed or archived."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Campaign in status '{status}' does not accept new leads")


class CampaignNotEditable(CampaignEngineError):
    """Structural edit attempted outside draft/paused."""

    def __init__(self, status: str, fields: Iterable[str]):
        self.status = status
        self.fields = sorted(fields)
        super().__init__(
            f"Fields {', '.join(self.fields)} can only be edited while the campaign "
            f"is draft or paused (current status: '{status}')"
        )


class PercentageImbalance(CampaignEngineError):
    """Manual assignee percentages do not add up to 100."""

    def __init__(self, total: int):
        self.total = total
        self.delta = 100 - total
        super().__init__(
            f"Assignee percentages add up to {total}%, "
            f"{abs(self.delta)}% {'short of' if self.delta > 0 else 'over'} 100%"
        )


class RecordDropped(CampaignEngineError):
    """A manually entered record has neither a client name nor an email."""

    def __init__(self, message: str = "A lead needs at least a client name or an email"):
        super().__init__(message)


class BatchSubmissionFailed(CampaignEngineError):
    """A chunk could not be submitted to the persistence boundary."""

    def __init__(self, batch_size: int, cause: Optional[BaseException] = None,
                 batch_index: Optional[int] = None):
        self.batch_size = batch_size
        self.batch_index = batch_index
        self.cause = cause
        super().__init__(f"Batch of {batch_size} leads failed: {cause}")


class PermissionDenied(CampaignEngineError):
    """Caller is not allowed to manage this campaign."""
    pass


class InvalidColumnMapping(CampaignEngineError):
    """Mapping override names an unknown field or a header absent from the source."""
    pass


class UnsupportedImportFile(CampaignEngineError):
    """Uploaded file could not be read as a tabular source."""
    pass
