"""Index module - configuration metadata extraction and lookup.

Pipeline: archive reader -> metadata parser -> property index, driven by
the builder and published through the coordinator to the query facade.

Public API:
- IndexCoordinator: generation tracking and publication
- QueryFacade: read-only list/lookup over the published index
- IndexBuilder, BuildResult, BuildStats: one-shot builds
"""

from propmeta.index.archive import ArchiveHandle, open_archive, read_metadata_entries
from propmeta.index.builder import BuildResult, BuildStats, IndexBuilder
from propmeta.index.classpath import read_path_list, split_path_list
from propmeta.index.models import Deprecation, PropertyDescriptor
from propmeta.index.ops import IndexCoordinator
from propmeta.index.parser import parse_metadata
from propmeta.index.query import QueryFacade
from propmeta.index.store import PropertyIndex

__all__ = [
    # Orchestration
    "IndexCoordinator",
    "IndexBuilder",
    "BuildResult",
    "BuildStats",
    "QueryFacade",
    # Pipeline stages
    "ArchiveHandle",
    "open_archive",
    "read_metadata_entries",
    "parse_metadata",
    "read_path_list",
    "split_path_list",
    # Models
    "Deprecation",
    "PropertyDescriptor",
    "PropertyIndex",
]
