"""
Data models for file history extraction.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ChangeStatus(Enum):
    """Status letter of a ``git diff --name-status`` entry."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNKNOWN = "X"

    @classmethod
    def from_token(cls, token: str) -> "ChangeStatus":
        """Map a raw status token such as ``R087`` to its status."""
        if not token:
            raise ValueError("Empty status token")
        try:
            return cls(token[0])
        except ValueError:
            return cls.UNKNOWN

    @property
    def has_two_paths(self) -> bool:
        return self in (ChangeStatus.RENAMED, ChangeStatus.COPIED)


class MatchPolicy(Enum):
    """Which candidate wins when several status records match the tracked path."""

    LAST = "last"
    FIRST = "first"


class TraversalDirection(Enum):
    """Order in which the tracked path is folded over the commit list."""

    BACKWARD = "backward"  # newest commit first
    FORWARD = "forward"  # oldest commit first


@dataclass(frozen=True)
class Commit:
    """Metadata of a single commit, as reported by git."""

    sha: str
    parents: tuple[str, ...]
    timestamp: int  # committer time, seconds since epoch
    author_name: str
    author_email: str
    message: str  # subject line
    date_human: str  # e.g. "2024-03-01 12:30:00"

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def first_parent(self) -> str | None:
        return self.parents[0] if self.parents else None


@dataclass(frozen=True)
class PathStatusRecord:
    """One entry of a commit's diff against its parent."""

    status: ChangeStatus
    old_path: str
    new_path: str | None = None
    similarity: int | None = None  # R/C score, 0-100

    @property
    def is_two_operand(self) -> bool:
        return self.new_path is not None


@dataclass(frozen=True)
class PathResolution:
    """Which path identifies the tracked file at one commit."""

    commit: str
    previous_path: str
    resolved_path: str
    matched: bool
    candidates: tuple[str, ...] = ()

    @property
    def ambiguous(self) -> bool:
        return len(set(self.candidates)) > 1


@dataclass
class ExportArtifact:
    """Files written for one commit. ``None`` means the file was not produced."""

    commit: Commit
    resolved_path: str
    content_file: Path | None = None
    patch_file: Path | None = None
    html_file: Path | None = None


@dataclass
class ExtractionResult:
    """Complete result of one extraction run."""

    filename: str
    output_dir: Path
    summary_file: Path
    artifacts: list[ExportArtifact] = field(default_factory=list)
    resolutions: list[PathResolution] = field(default_factory=list)
    html_enabled: bool = False
    html_available: bool = False

    @property
    def total_commits(self) -> int:
        return len(self.artifacts)

    @property
    def content_count(self) -> int:
        return sum(1 for a in self.artifacts if a.content_file is not None)

    @property
    def patch_count(self) -> int:
        return sum(1 for a in self.artifacts if a.patch_file is not None)

    @property
    def html_count(self) -> int:
        return sum(1 for a in self.artifacts if a.html_file is not None)
