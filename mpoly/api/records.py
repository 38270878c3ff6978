"""Record API endpoints (read-only, scoped by role)."""

from fastapi import APIRouter, Depends

from mpoly.api.dependencies import get_current_claims, get_record_service
from mpoly.models.auth import TokenClaims
from mpoly.models.response import RecordListResponse, RecordResponse
from mpoly.services.record_service import RecordService

router = APIRouter(prefix="/records", tags=["Records"])


@router.get("")
async def list_records(
    claims: TokenClaims = Depends(get_current_claims),
    record_service: RecordService = Depends(get_record_service),
) -> RecordListResponse:
    """List records visible to the caller.

    Admins get every record; other users only their own. Each record carries
    the owner's display name as ``ownerName``.
    """
    records = await record_service.list_for_caller(claims)
    return RecordListResponse(role=claims.role, total=len(records), data=records)


@router.get("/{record_id}")
async def get_record(
    record_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    record_service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """Fetch one record.

    Raises:
        Forbidden 403: If the caller neither owns the record nor is admin
        NotFound 404: If the record does not exist
    """
    record = await record_service.get_by_id(record_id, claims)
    return RecordResponse(data=record)
