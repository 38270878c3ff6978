"""File-backed document store for the Users and Records collections.

Each collection lives in its own XML document::

    <users>
      <user><id>...</id><userId>...</userId>...</user>
      ...
    </users>

The store has no transactions. ``replace`` rewrites the whole file from the
caller's snapshot, so two writers that loaded the same snapshot will lose
one another's changes. Within a process, mutating service operations hold
``lock(collection)`` around their load/modify/replace cycle; writers in other
processes are not coordinated.
"""

import asyncio
import copy
import os
import tempfile
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from mpoly.errors import StoreCorrupt, StoreUnavailable

logger = structlog.get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

Entity = dict[str, str]


class Collection(str, Enum):
    """The persisted collections; the value is the document's root tag."""

    USERS = "users"
    RECORDS = "records"

    @property
    def entity_tag(self) -> str:
        return self.value[:-1]


def _element_to_value(element: ET.Element) -> Union[str, dict[str, Any]]:
    """Convert an element into plain data.

    Leaf elements become their text. Elements with children become a mapping
    of tag to value; a tag that occurs once maps to a bare value, a repeated
    tag maps to a list.
    """
    children = list(element)
    if not children:
        return element.text or ""

    value: dict[str, Any] = {}
    for child in children:
        item = _element_to_value(child)
        if child.tag not in value:
            value[child.tag] = item
        elif isinstance(value[child.tag], list):
            value[child.tag].append(item)
        else:
            value[child.tag] = [value[child.tag], item]
    return value


def normalize_entities(raw: Any, collection: Collection) -> list[Entity]:
    """Expose the entity slot of a parsed document as an ordered list.

    A document with a single entity parses to a bare mapping rather than a
    list of one; an empty document parses to text or nothing.
    """
    if raw is None or isinstance(raw, str):
        return []
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise StoreCorrupt(f"Unexpected {collection.value} document shape")

    entities: list[Entity] = []
    for item in raw:
        if not isinstance(item, dict):
            raise StoreCorrupt(
                f"<{collection.entity_tag}> element without fields in {collection.value}"
            )
        for key, value in item.items():
            if not isinstance(value, str):
                raise StoreCorrupt(
                    f"Field '{key}' of a {collection.entity_tag} is not a flat value"
                )
        entities.append(dict(item))
    return entities


def parse_document(text: str, collection: Collection) -> list[Entity]:
    """Parse a serialized collection document into entities."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise StoreCorrupt(f"Cannot parse {collection.value} document: {e}") from e

    if root.tag != collection.value:
        raise StoreCorrupt(
            f"Expected <{collection.value}> root element, found <{root.tag}>"
        )

    document = _element_to_value(root)
    raw = document.get(collection.entity_tag) if isinstance(document, dict) else None
    return normalize_entities(raw, collection)


def serialize_document(entities: list[Entity], collection: Collection) -> str:
    """Serialize entities into a complete collection document."""
    root = ET.Element(collection.value)
    for entity in entities:
        node = ET.SubElement(root, collection.entity_tag)
        for key, value in entity.items():
            field = ET.SubElement(node, key)
            field.text = "" if value is None else str(value)
    ET.indent(root, space="  ")
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


class DocumentStore:
    """Owner of the on-disk collections and their in-memory snapshots."""

    def __init__(
        self,
        data_dir: Union[str, Path],
        users_file: str = "users.xml",
        records_file: str = "records.xml",
    ):
        self.data_dir = Path(data_dir)
        self._paths = {
            Collection.USERS: self.data_dir / users_file,
            Collection.RECORDS: self.data_dir / records_file,
        }
        self._locks = {collection: asyncio.Lock() for collection in Collection}
        # collection -> ((inode, mtime_ns, size), entities)
        self._snapshots: dict[Collection, tuple[tuple[int, int, int], list[Entity]]] = {}

    def path_for(self, collection: Collection) -> Path:
        return self._paths[collection]

    def lock(self, collection: Collection) -> asyncio.Lock:
        """Mutual-exclusion section for writers of ``collection``.

        Reads never take it and may observe the snapshot from before a
        concurrent write.
        """
        return self._locks[collection]

    async def load(self, collection: Collection) -> list[Entity]:
        """Return every entity of ``collection`` in document order.

        Raises:
            StoreUnavailable: If the file is missing or unreadable
            StoreCorrupt: If the document is malformed
        """
        entities = await asyncio.to_thread(self._load_snapshot, collection)
        return copy.deepcopy(entities)

    async def replace(self, collection: Collection, entities: list[Entity]) -> None:
        """Rewrite ``collection`` with ``entities``.

        The new document is written to a temporary file and moved into place,
        so readers see either the previous or the new document.

        Raises:
            StoreUnavailable: If the file cannot be written
        """
        snapshot = copy.deepcopy(entities)
        await asyncio.to_thread(self._write_snapshot, collection, snapshot)

    def exists(self, collection: Collection) -> bool:
        return self._paths[collection].is_file()

    def _stat_key(self, path: Path) -> tuple[int, int, int]:
        try:
            stat = path.stat()
        except OSError as e:
            raise StoreUnavailable(f"Cannot access {path}: {e}") from e
        return stat.st_ino, stat.st_mtime_ns, stat.st_size

    def _load_snapshot(self, collection: Collection) -> list[Entity]:
        path = self._paths[collection]
        key = self._stat_key(path)

        cached = self._snapshots.get(collection)
        if cached is not None and cached[0] == key:
            return cached[1]

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreUnavailable(f"Cannot read {path}: {e}") from e

        entities = parse_document(text, collection)
        self._snapshots[collection] = (key, entities)
        logger.debug(
            "collection_loaded",
            collection=collection.value,
            count=len(entities),
        )
        return entities

    def _write_snapshot(self, collection: Collection, entities: list[Entity]) -> None:
        path = self._paths[collection]
        payload = serialize_document(entities, collection)

        tmp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", path=tmp_name)

        self._snapshots[collection] = (self._stat_key(path), entities)
        logger.info(
            "collection_replaced",
            collection=collection.value,
            count=len(entities),
        )
