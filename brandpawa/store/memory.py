import copy
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..constants import EntityType
from .base import NaturalKey, Record, RecordStore, entity_name, make_key, sort_records

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """Dict-backed store for tests and local runs. Records are copied in and out."""

    def __init__(self):
        self._records: Dict[Tuple[str, NaturalKey], Record] = {}

    def get(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> Optional[Record]:
        record = self._records.get((entity_name(entity_type), make_key(*key)))
        return copy.deepcopy(record) if record is not None else None

    def upsert(self, entity_type: Union[EntityType, str], key: Sequence[str], record: Record) -> None:
        self._records[(entity_name(entity_type), make_key(*key))] = copy.deepcopy(record)

    def delete(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> bool:
        return self._records.pop((entity_name(entity_type), make_key(*key)), None) is not None

    def list_by_key(
        self,
        entity_type: Union[EntityType, str],
        partial_key: Sequence[str],
        order_by: Optional[str] = None,
    ) -> List[Record]:
        name = entity_name(entity_type)
        prefix = make_key(*partial_key) if partial_key else ()
        matches = [
            copy.deepcopy(record)
            for (stored_name, key), record in self._records.items()
            if stored_name == name and key[:len(prefix)] == prefix
        ]
        return sort_records(matches, order_by)

    def __len__(self) -> int:
        return len(self._records)
