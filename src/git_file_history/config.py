"""
Configuration system for file history extraction.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path

from ..shared_utilities import generate_output_dirname, get_logger
from .data_models import MatchPolicy, TraversalDirection
from .exceptions import ConfigurationError

logger = get_logger(__name__)

DEFAULT_FILENAME = "cdc.md"
DEFAULT_THRESHOLD = "1%"
SUMMARY_FILENAME = "summary.txt"
HTML_RENDERERS = ("diff2html", "pygments")

# git accepts "50%", "50" (read as 0.50) or "0.5"
_THRESHOLD_PATTERN = re.compile(r"^\d+(\.\d+)?%?$")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(value: str | bool | None, default: bool = False) -> bool:
    """Interpret an environment-style flag such as ENABLE_HTML_DIFF=1."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


def validate_threshold(value: str, name: str = "threshold") -> str:
    """Check a similarity threshold and return it stripped."""
    threshold = str(value).strip()
    if not _THRESHOLD_PATTERN.match(threshold):
        raise ConfigurationError(
            f"Invalid {name} {value!r}: expected a similarity such as '50%'"
        )
    if threshold.endswith("%") and float(threshold[:-1]) > 100:
        raise ConfigurationError(f"Invalid {name} {value!r}: above 100%")
    return threshold


@dataclass
class HistoryConfig:
    """Configuration for one file history extraction run."""

    filename: str = DEFAULT_FILENAME
    rename_threshold: str = DEFAULT_THRESHOLD
    copy_threshold: str = DEFAULT_THRESHOLD
    enable_html_diff: bool = False
    html_renderer: str = "diff2html"
    output_dir: Path | None = None
    direction: TraversalDirection = TraversalDirection.BACKWARD
    match_policy: MatchPolicy = MatchPolicy.LAST
    content_extension: str = "md"
    repo_path: Path | None = None

    def __post_init__(self):
        """Validate values and fill in derived defaults."""
        if not self.filename or not self.filename.strip():
            raise ConfigurationError("A filename to track is required")

        self.rename_threshold = validate_threshold(
            self.rename_threshold, "rename threshold"
        )
        self.copy_threshold = validate_threshold(self.copy_threshold, "copy threshold")

        self.html_renderer = self.html_renderer.strip().lower()
        if self.html_renderer not in HTML_RENDERERS:
            raise ConfigurationError(
                f"Unknown HTML renderer {self.html_renderer!r}, "
                f"expected one of: {', '.join(HTML_RENDERERS)}"
            )

        try:
            self.direction = TraversalDirection(self.direction)
            self.match_policy = MatchPolicy(self.match_policy)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self.content_extension = self.content_extension.lstrip(".")
        if not self.content_extension:
            raise ConfigurationError("Content extension must not be empty")

        if self.output_dir is None:
            self.output_dir = Path(generate_output_dirname(self.filename))
        else:
            self.output_dir = Path(self.output_dir)

        if self.repo_path is not None:
            self.repo_path = Path(self.repo_path)

    @property
    def summary_file(self) -> Path:
        return self.output_dir / SUMMARY_FILENAME

    @classmethod
    def from_env(
        cls, filename: str = DEFAULT_FILENAME, environ: dict | None = None
    ) -> "HistoryConfig":
        """Build a configuration from environment variables.

        Args:
            filename: Path of the file to track
            environ: Mapping to read instead of ``os.environ``
        """
        env = os.environ if environ is None else environ

        config = cls(
            filename=filename,
            rename_threshold=env.get("RENAME_THRESHOLD", DEFAULT_THRESHOLD),
            copy_threshold=env.get("COPY_THRESHOLD", DEFAULT_THRESHOLD),
            enable_html_diff=parse_bool(env.get("ENABLE_HTML_DIFF")),
            html_renderer=env.get("HTML_RENDERER", "diff2html"),
            output_dir=env.get("OUTPUT_DIR") or None,
            direction=env.get("TRAVERSAL_DIRECTION", "backward").lower(),
            match_policy=env.get("MATCH_POLICY", "last").lower(),
            content_extension=env.get("CONTENT_EXTENSION", "md"),
            repo_path=env.get("GIT_FILE_HISTORY_REPO") or None,
        )
        logger.debug(f"Configuration loaded from environment: {config}")
        return config
