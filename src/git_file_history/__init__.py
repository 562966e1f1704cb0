"""
File history extraction toolkit.

Exports every revision of a single file from a git working tree, following
renames and copies, together with per-commit patches and a summary log.
"""

from .config import HistoryConfig
from .core import FileHistoryExtractor
from .data_models import (
    ChangeStatus,
    Commit,
    ExportArtifact,
    ExtractionResult,
    MatchPolicy,
    PathResolution,
    PathStatusRecord,
    TraversalDirection,
)
from .exceptions import (
    ConfigurationError,
    FileHistoryError,
    NotAGitRepositoryError,
    RevisionSourceError,
)
from .path_tracker import resolve, track_paths

__all__ = [
    "FileHistoryExtractor",
    "HistoryConfig",
    "ChangeStatus",
    "Commit",
    "ExportArtifact",
    "ExtractionResult",
    "MatchPolicy",
    "PathResolution",
    "PathStatusRecord",
    "TraversalDirection",
    "ConfigurationError",
    "FileHistoryError",
    "NotAGitRepositoryError",
    "RevisionSourceError",
    "resolve",
    "track_paths",
]
