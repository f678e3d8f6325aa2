import abc
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..constants import EntityType

logger = logging.getLogger(__name__)

NaturalKey = Tuple[str, ...]
Record = Dict[str, Any]

KEY_SEPARATOR = "/"


def make_key(*parts: Any) -> NaturalKey:
    """Builds a natural key, rejecting empty parts and parts containing the separator."""
    key = tuple(str(part) for part in parts)
    for part in key:
        if not part:
            raise ValueError(f"Natural key parts must be non-empty: {key!r}")
        if KEY_SEPARATOR in part:
            raise ValueError(f"Natural key part {part!r} contains reserved separator '{KEY_SEPARATOR}'")
    return key


def encode_key(key: Sequence[str]) -> str:
    return KEY_SEPARATOR.join(make_key(*key))


def sort_records(records: List[Record], order_by: Optional[str]) -> List[Record]:
    """Orders records by one field; a leading '-' sorts descending. Missing values sort first."""
    if not order_by:
        return records
    descending = order_by.startswith("-")
    field = order_by.lstrip("-")
    return sorted(
        records,
        key=lambda record: (record.get(field) is not None, record.get(field)),
        reverse=descending,
    )


class RecordStore(abc.ABC):
    """
    Key-addressed record store consumed by the managers.

    Records are plain JSON-compatible dicts addressed by (entity type, natural key).
    Implementations raise PersistenceFailure for any backend error.
    """

    @abc.abstractmethod
    def get(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> Optional[Record]:
        """Returns the record or None when absent."""

    @abc.abstractmethod
    def upsert(self, entity_type: Union[EntityType, str], key: Sequence[str], record: Record) -> None:
        """Inserts or wholly replaces the record under its natural key."""

    @abc.abstractmethod
    def delete(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> bool:
        """Removes the record. Returns False when nothing was stored under the key."""

    @abc.abstractmethod
    def list_by_key(
        self,
        entity_type: Union[EntityType, str],
        partial_key: Sequence[str],
        order_by: Optional[str] = None,
    ) -> List[Record]:
        """Returns every record whose natural key starts with `partial_key`."""


def entity_name(entity_type: Union[EntityType, str]) -> str:
    return entity_type.value if isinstance(entity_type, EntityType) else str(entity_type)
