"""Record models.

Records are read-only for this service. Apart from ``id`` and ``userId`` their
fields (title, category, priority, status, amount, timestamps) are carried
through untouched.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

UNKNOWN_OWNER = "Unknown"


class Record(BaseModel):
    """A business record owned by one user."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    user_id: str


class RecordView(Record):
    """A record enriched with its owner's display name."""

    owner_name: str
