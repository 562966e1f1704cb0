"""
Output directory management utilities for per-file history exports.

The export directory is created on demand and artifacts from a previous run
are overwritten or removed, so a re-run leaves the same set of files.
"""

from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)


class OutputManager:
    """Manages the output directory of a single export run."""

    def __init__(self, base_output_dir: str | Path = "."):
        """
        Initialize the output manager.

        Args:
            base_output_dir: Directory relative output directories are resolved against
        """
        self.base_dir = Path(base_output_dir)

    def get_output_dir(self, directory: str | Path, create_dirs: bool = True) -> Path:
        """
        Resolve an export directory, creating it if needed.

        Args:
            directory: Absolute path, or path relative to the base directory
            create_dirs: Whether to create the directory if it doesn't exist

        Returns:
            Path to the export directory
        """
        output_dir = Path(directory)
        if not output_dir.is_absolute():
            output_dir = self.base_dir / output_dir

        if create_dirs:
            output_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Output directory ready: {output_dir}")

        return output_dir

    def prepare(self, directory: str | Path, summary_name: str = "summary.txt") -> Path:
        """
        Create the export directory.

        Args:
            directory: Export directory
            summary_name: Name of the summary file inside the directory

        Returns:
            Path the summary file lives at
        """
        return self.get_output_dir(directory) / summary_name

    def write_artifact(self, path: Path, data: bytes | str) -> Path:
        """
        Write an artifact, replacing any file left by a previous run.

        Args:
            path: Destination path
            data: Raw bytes (file content) or text (patch, HTML)

        Returns:
            Path to the written file
        """
        if isinstance(data, bytes):
            path.write_bytes(data)
        else:
            path.write_text(data, encoding="utf-8")

        logger.debug(f"Saved artifact {path} (size {len(data)})")
        return path

    def remove_artifact(self, path: Path) -> None:
        """Remove a stale artifact from a previous run, if present."""
        if path.exists():
            path.unlink()
            logger.debug(f"Removed stale artifact {path}")
