"""Role-scoped, read-only access to the Records collection."""

import structlog

from mpoly.errors import Forbidden, NotFound, StoreCorrupt
from mpoly.models.auth import TokenClaims
from mpoly.models.record import UNKNOWN_OWNER, Record, RecordView
from mpoly.store import Collection, DocumentStore

logger = structlog.get_logger(__name__)


def _validate_record(entity: dict[str, str], model: type[Record] = Record) -> Record:
    try:
        return model.model_validate(entity)
    except ValueError as e:
        raise StoreCorrupt(f"Invalid record entity {entity.get('id', '?')}") from e


class RecordService:
    """Service for scoped record reads.

    Administrators see every record; everyone else sees only the records
    whose ``userId`` equals their own ``id``.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_for_caller(self, claims: TokenClaims) -> list[RecordView]:
        """Return the records visible to the caller, each with ``ownerName``.

        For administrators the owner name is looked up in the Users
        collection, falling back to "Unknown" for deleted owners. Other
        callers only ever see their own records, named after themselves.
        """
        records = await self.store.load(Collection.RECORDS)

        if claims.is_admin:
            users = await self.store.load(Collection.USERS)
            names = {u.get("id"): u.get("name") for u in users}
            views = [
                _validate_record(
                    {**r, "ownerName": names.get(r.get("userId")) or UNKNOWN_OWNER},
                    RecordView,
                )
                for r in records
            ]
        else:
            views = [
                _validate_record({**r, "ownerName": claims.name}, RecordView)
                for r in records
                if r.get("userId") == claims.id
            ]

        logger.debug(
            "records_listed",
            user_id=claims.id,
            role=claims.role.value,
            count=len(views),
        )
        return views

    async def get_by_id(self, record_id: str, claims: TokenClaims) -> Record:
        """Return a single record, unenriched.

        Raises:
            NotFound: If no record has this id
            Forbidden: If the caller is not admin and does not own the record
        """
        records = await self.store.load(Collection.RECORDS)
        entity = next((r for r in records if r.get("id") == record_id), None)
        if entity is None:
            raise NotFound("Record not found.")

        if not claims.is_admin and entity.get("userId") != claims.id:
            raise Forbidden()

        return _validate_record(entity)
