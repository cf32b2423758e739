"""
Tabular import router for uploading and importing leads from files.
Supports CSV (.csv) and Excel (.xlsx) formats.
"""
import json
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from ..context import CallerContext
from ..dependencies import get_caller_context, get_campaign_store, get_import_pipeline
from ..exceptions import CampaignEngineError
from ..schemas.csv_import import ImportPreviewResponse, ImportRequest, ImportResult
from ..services.protocols import CampaignStoreProtocol
from ..services.import_pipeline import ImportPipeline, build_tabular_candidates, preview_tabular_import
from ..services.tabular_reader import parse_file_to_rows
from .errors import http_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/lead-campaigns/{campaign_id}/import", tags=["lead-import"])


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_file_import(
    campaign_id: str,
    file: UploadFile = File(...),
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
):
    """
    Upload a CSV or Excel file and preview the import.
    Returns the proposed column mapping, skipped row count and sample rows.
    """
    try:
        await store.get_campaign(context, campaign_id)
        content = await file.read()
        columns, rows = parse_file_to_rows(file.filename or "", content)
    except CampaignEngineError as e:
        raise http_error(e)

    if not rows:
        raise HTTPException(status_code=400, detail="File is empty or contains no data rows")

    preview = preview_tabular_import(columns, rows, file_name=file.filename)
    logger.info(
        f"Preview for campaign {campaign_id}: {preview.skipped_rows} of "
        f"{preview.total_rows} rows will be skipped"
    )
    return preview


@router.post("/execute", response_model=ImportResult)
async def execute_import(
    campaign_id: str,
    request: ImportRequest,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
):
    """
    Import parsed rows with the proposed or user-edited column mapping.
    """
    if not request.rows:
        raise HTTPException(status_code=400, detail="No rows to import")

    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        aggregate.ensure_manageable(context)
        _, candidates = build_tabular_candidates(request.columns, request.rows, request.column_mapping)
        return await pipeline.import_batch(aggregate, candidates, batch_size=request.batch_size)
    except CampaignEngineError as e:
        raise http_error(e)


@router.post("/stream")
async def stream_import(
    campaign_id: str,
    request: ImportRequest,
    context: CallerContext = Depends(get_caller_context),
    store: CampaignStoreProtocol = Depends(get_campaign_store),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
):
    """
    Same as /execute, streamed as newline-delimited JSON: one
    {"progress": ...} line per batch, then one {"result": ...} line.
    """
    if not request.rows:
        raise HTTPException(status_code=400, detail="No rows to import")

    # Gating errors surface here, before any batch is submitted
    try:
        aggregate = await store.get_aggregate(context, campaign_id)
        aggregate.ensure_manageable(context)
        _, candidates = build_tabular_candidates(request.columns, request.rows, request.column_mapping)
        job = pipeline.start(aggregate, candidates, batch_size=request.batch_size)
    except CampaignEngineError as e:
        raise http_error(e)

    async def events():
        async for progress in job.batches():
            yield json.dumps({"progress": progress.model_dump()}) + "\n"
        yield json.dumps({"result": job.result().model_dump(mode="json")}) + "\n"

    return StreamingResponse(events(), media_type="application/x-ndjson")
