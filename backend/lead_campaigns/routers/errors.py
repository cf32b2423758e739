"""
Translation of engine errors into HTTP errors.
"""
import logging

from fastapi import HTTPException, status

from ..exceptions import (
    CampaignEngineError,
    CampaignNotEditable,
    CampaignNotFound,
    CampaignNotIngestible,
    InvalidColumnMapping,
    InvalidTransition,
    PercentageImbalance,
    PermissionDenied,
    RecordDropped,
    UnsupportedImportFile,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    CampaignNotFound: status.HTTP_404_NOT_FOUND,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    InvalidTransition: status.HTTP_409_CONFLICT,
    CampaignNotIngestible: status.HTTP_409_CONFLICT,
    CampaignNotEditable: status.HTTP_409_CONFLICT,
    PercentageImbalance: status.HTTP_409_CONFLICT,
    RecordDropped: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidColumnMapping: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnsupportedImportFile: status.HTTP_400_BAD_REQUEST,
}


def http_error(error: CampaignEngineError) -> HTTPException:
    """Map an engine error to an HTTPException carrying its message."""
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=code, detail=str(error))
    logger.error(f"Unhandled campaign engine error: {error}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
