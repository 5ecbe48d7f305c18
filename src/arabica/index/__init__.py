"""Class name indexing package."""

from .discovery import DiscoveryError, find_archives, is_hidden_entry
from .manager import IndexManager, IndexStatus, LoadResult, ProgressReporter
from .models import ClassIndex, IndexProgress, MergeSummary, short_name_of
from .persistence import (
    INDEX_SCHEMA_VERSION,
    IndexSchemaUnsupportedError,
    PersistenceError,
    load_index,
    save_index,
)
from .scanner import ArchiveScanError, class_name_from_entry, index_archive, iter_class_names

__all__ = [
    "ArchiveScanError",
    "ClassIndex",
    "DiscoveryError",
    "INDEX_SCHEMA_VERSION",
    "IndexManager",
    "IndexProgress",
    "IndexSchemaUnsupportedError",
    "IndexStatus",
    "LoadResult",
    "MergeSummary",
    "PersistenceError",
    "ProgressReporter",
    "class_name_from_entry",
    "find_archives",
    "index_archive",
    "is_hidden_entry",
    "iter_class_names",
    "load_index",
    "save_index",
    "short_name_of",
]
