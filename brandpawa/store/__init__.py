# Persistence port and its adapters
from .base import KEY_SEPARATOR, NaturalKey, Record, RecordStore, encode_key, make_key, sort_records
from .memory import InMemoryRecordStore
from .sql import SqlRecordStore
