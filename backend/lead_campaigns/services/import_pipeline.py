"""
Chunked ingestion of lead candidates into a campaign.

Candidates without a client name and an email are dropped up front. The rest
are submitted in fixed-size batches, strictly one after another; a failing
batch counts all of its candidates as errors and the next batch still runs.
Progress is reported after every batch.

Ingestion into the same campaign from two callers at once is not coordinated
here; callers must serialize it.
"""
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..config import get_settings
from ..exceptions import BatchSubmissionFailed, RecordDropped
from ..schemas.csv_import import ColumnMapping, ImportPreviewResponse, ImportProgress, ImportResult
from ..schemas.lead import LeadCandidate, ManualLeadEntry
from .campaign_aggregate import CampaignAggregate
from .column_mapper import apply_mapping_overrides, detect_column_mapping, validate_column_mapping
from .protocols import LeadSubmitter
from .record_normalizer import normalize_manual_entry, normalize_rows, split_identifiable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ImportProgress], Union[None, Awaitable[None]]]


def chunked(items: List[LeadCandidate], size: int) -> List[List[LeadCandidate]]:
    """Split items into consecutive chunks of at most size, preserving order."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [items[i:i + size] for i in range(0, len(items), size)]


class ImportJob:
    """
    State of one ingestion call.

    Counters only ever grow; the job is complete once every kept candidate
    has been through a batch.
    """

    def __init__(
        self,
        campaign: CampaignAggregate,
        candidates: List[LeadCandidate],
        submitter: LeadSubmitter,
        batch_size: int,
        skipped: int = 0,
    ):
        self.campaign = campaign
        self.batch_size = batch_size
        self.skipped_rows = skipped
        self.total_rows = len(candidates)
        self.processed_rows = 0
        self.created_count = 0
        self.error_count = 0
        self._candidates = candidates
        self._submitter = submitter
        self._started = False

    @property
    def complete(self) -> bool:
        return self.processed_rows >= self.total_rows

    def progress(self) -> ImportProgress:
        return ImportProgress(
            total=self.total_rows,
            processed=self.processed_rows,
            created=self.created_count,
            errors=self.error_count,
        )

    def result(self) -> ImportResult:
        return ImportResult(
            total=self.total_rows,
            skipped_count=self.skipped_rows,
            created_count=self.created_count,
            error_count=self.error_count,
            campaign_stats=self.campaign.stats,
        )

    async def _submit(self, index: int, chunk: List[LeadCandidate]) -> None:
        try:
            response = await self._submitter.create_leads(self.campaign.id, chunk)
        except Exception as e:
            failure = e if isinstance(e, BatchSubmissionFailed) else BatchSubmissionFailed(len(chunk), e, index)
            logger.warning(
                f"Campaign {self.campaign.id}: batch {index + 1} "
                f"({len(chunk)} leads) failed: {failure.cause or failure}"
            )
            self.error_count += len(chunk)
            return

        self.created_count += response.summary.created
        self.error_count += response.summary.errors
        self.campaign.replace_stats(response.campaign.stats)

    async def batches(self) -> AsyncIterator[ImportProgress]:
        """
        Submit every batch in order, yielding progress after each one.

        A caller that stops iterating stops the import after the current
        batch; a batch already submitted is never interrupted.
        """
        if self._started:
            raise RuntimeError("Import job already started")
        self._started = True

        for index, chunk in enumerate(chunked(self._candidates, self.batch_size)):
            await self._submit(index, chunk)
            self.processed_rows += len(chunk)
            yield self.progress()

        logger.info(
            f"Campaign {self.campaign.id}: import finished, "
            f"{self.created_count} created, {self.error_count} errors, "
            f"{self.skipped_rows} skipped"
        )


class ImportPipeline:
    """Entry point for manual, bulk and tabular ingestion."""

    def __init__(self, submitter: LeadSubmitter, batch_size: Optional[int] = None):
        self.submitter = submitter
        self.batch_size = batch_size or get_settings().import_batch_size

    def start(
        self,
        campaign: CampaignAggregate,
        candidates: List[LeadCandidate],
        batch_size: Optional[int] = None,
    ) -> ImportJob:
        """
        Gate and prepare an import without submitting anything.

        Raises CampaignNotIngestible before any candidate is looked at.
        """
        campaign.ensure_ingestible()
        kept, dropped = split_identifiable(candidates)
        if dropped:
            logger.info(
                f"Campaign {campaign.id}: {dropped} of {len(candidates)} rows will be skipped "
                f"(no client name or email)"
            )
        size = batch_size or self.batch_size
        logger.info(
            f"Campaign {campaign.id}: importing {len(kept)} leads in batches of {size}"
        )
        return ImportJob(campaign, kept, self.submitter, size, skipped=dropped)

    async def import_batch(
        self,
        campaign: CampaignAggregate,
        candidates: List[LeadCandidate],
        batch_size: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """Run a whole import, calling on_progress between batches."""
        job = self.start(campaign, candidates, batch_size)
        async for progress in job.batches():
            if on_progress is not None:
                outcome = on_progress(progress)
                if outcome is not None:
                    await outcome
        return job.result()

    async def add_manual_lead(
        self,
        campaign: CampaignAggregate,
        entry: ManualLeadEntry,
    ) -> ImportResult:
        """Single-record ingestion; an unidentifiable record is refused."""
        campaign.ensure_ingestible()
        candidate = normalize_manual_entry(entry)
        if not candidate.is_identifiable:
            raise RecordDropped()
        return await self.import_batch(campaign, [candidate], batch_size=1)


# ---------------------------------------------------------------------------
# Tabular sources
# ---------------------------------------------------------------------------

def resolve_mapping(
    columns: List[str],
    mapping: Optional[ColumnMapping] = None,
    overrides: Optional[Dict[str, Optional[str]]] = None,
) -> ColumnMapping:
    """Use the caller's mapping if given, otherwise the proposed one plus overrides."""
    if mapping is not None:
        return validate_column_mapping(mapping, columns)
    proposed = detect_column_mapping(columns)
    if overrides:
        return apply_mapping_overrides(proposed, overrides, columns)
    return proposed


def build_tabular_candidates(
    columns: List[str],
    rows: List[Dict[str, str]],
    mapping: Optional[ColumnMapping] = None,
) -> Tuple[ColumnMapping, List[LeadCandidate]]:
    """Map and normalize every row of a tabular source."""
    resolved = resolve_mapping(columns, mapping)
    return resolved, normalize_rows(rows, resolved)


def preview_tabular_import(
    columns: List[str],
    rows: List[Dict[str, str]],
    file_name: Optional[str] = None,
    preview_count: Optional[int] = None,
) -> ImportPreviewResponse:
    """Proposed mapping, skip count and first normalized rows of a source."""
    mapping, candidates = build_tabular_candidates(columns, rows)
    kept, dropped = split_identifiable(candidates)
    count = preview_count if preview_count is not None else get_settings().import_preview_rows

    return ImportPreviewResponse(
        file_name=file_name,
        total_rows=len(rows),
        skipped_rows=dropped,
        importable_rows=len(kept),
        detected_columns=columns,
        column_mapping=mapping,
        preview_rows=kept[:count],
        rows=rows,
    )
