"""
Append-only summary log of an extraction run.
"""

from pathlib import Path

from ..shared_utilities import ensure_output_directory, get_logger
from .data_models import Commit, ExportArtifact

SEPARATOR = "-" * 50

# Labels are padded to a common width so the values line up
LABEL_COMMIT = "Commit         "
LABEL_TIMESTAMP = "Timestamp (UTC)"
LABEL_AUTHOR = "Auteur         "
LABEL_MESSAGE = "Message        "
LABEL_CONTENT = "Fichier extrait"
LABEL_PATCH = "Patch          "
LABEL_HTML = "Diff HTML      "


def format_record(commit: Commit, artifact: ExportArtifact) -> str:
    """Build the summary block for one commit; missing artifacts get no line."""
    lines = [
        f"{LABEL_COMMIT}: {commit.sha}",
        f"{LABEL_TIMESTAMP}: {commit.timestamp} ({commit.date_human})",
        f"{LABEL_AUTHOR}: {commit.author_name} <{commit.author_email}>",
        f"{LABEL_MESSAGE}: {commit.message}",
    ]
    if artifact.content_file is not None:
        lines.append(f"{LABEL_CONTENT}: {artifact.content_file}")
    if artifact.patch_file is not None:
        lines.append(f"{LABEL_PATCH}: {artifact.patch_file}")
    if artifact.html_file is not None:
        lines.append(f"{LABEL_HTML}: {artifact.html_file}")
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"


class SummaryWriter:
    """Writes one record per processed commit to ``summary.txt``."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.logger = get_logger(__name__)
        self.records_written = 0

    def reset(self) -> None:
        """Truncate the summary; called once at the start of a run."""
        ensure_output_directory(self.path)
        self.path.write_text("", encoding="utf-8")
        self.records_written = 0

    def append(self, commit: Commit, artifact: ExportArtifact) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(format_record(commit, artifact))
        self.records_written += 1
        self.logger.debug(f"Summary record added for {commit.sha}")
