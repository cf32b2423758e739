"""
Business logic services.
"""
from .campaign_aggregate import CampaignAggregate
from .campaign_store import SqlCampaignStore
from .import_pipeline import ImportJob, ImportPipeline
from .persistence_client import RemoteLeadSubmitter

__all__ = ["CampaignAggregate", "SqlCampaignStore", "ImportJob", "ImportPipeline", "RemoteLeadSubmitter"]
