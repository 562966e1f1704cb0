"""
Per-commit artifact export.

Content, patch and HTML are attempted independently and at most once; a
failure only omits the corresponding file.
"""

from pathlib import Path
from typing import Protocol

from ..shared_utilities import OutputManager, generate_artifact_filename, get_logger
from ..shared_utilities.telemetry import trace_operation
from .data_models import Commit, ExportArtifact
from .exceptions import RevisionSourceError
from .html_renderer import HtmlRenderer


class RevisionReader(Protocol):
    """The part of the revision source the exporter reads from."""

    def get_content(self, sha: str, path: str) -> bytes | None: ...

    def get_patch(self, sha: str, path: str) -> str: ...


def is_empty_patch(patch_text: str | None) -> bool:
    """A patch is empty when it carries no diff section for the path."""
    if not patch_text or not patch_text.strip():
        return True
    return not any(
        line.startswith(("diff --git ", "diff --cc ", "diff --combined "))
        for line in patch_text.splitlines()
    )


class RevisionExporter:
    """Writes the content, patch and optional HTML diff of a commit."""

    def __init__(
        self,
        source: RevisionReader,
        output_dir: Path,
        content_extension: str = "md",
        renderer: HtmlRenderer | None = None,
        output_manager: OutputManager | None = None,
    ):
        """Initialize the exporter.

        Args:
            source: Where content and patches are read from
            output_dir: Existing directory the artifacts are written to
            content_extension: Extension of the extracted content files
            renderer: HTML renderer, None to skip HTML generation
            output_manager: Writes the files (default: a fresh OutputManager)
        """
        self.logger = get_logger(__name__)
        self.source = source
        self.output_dir = Path(output_dir)
        self.content_extension = content_extension
        self.renderer = renderer
        self.output_manager = output_manager or OutputManager()

    def artifact_path(self, commit: Commit, path: str, extension: str) -> Path:
        return self.output_dir / generate_artifact_filename(
            commit.timestamp, commit.sha, path, extension
        )

    def export(self, commit: Commit, resolved_path: str) -> ExportArtifact:
        """Export every artifact available for ``commit`` at ``resolved_path``."""
        artifact = ExportArtifact(commit=commit, resolved_path=resolved_path)

        with trace_operation(
            "export_revision", {"commit": commit.sha, "path": resolved_path}
        ):
            artifact.content_file = self._export_content(commit, resolved_path)
            artifact.patch_file, patch_text = self._export_patch(commit, resolved_path)
            if self.renderer is not None and patch_text is not None:
                artifact.html_file = self._export_html(
                    commit, resolved_path, patch_text
                )
            else:
                self.output_manager.remove_artifact(
                    self.artifact_path(commit, resolved_path, "html")
                )

        return artifact

    def _export_content(self, commit: Commit, path: str) -> Path | None:
        target = self.artifact_path(commit, path, self.content_extension)

        try:
            content = self.source.get_content(commit.sha, path)
        except RevisionSourceError as e:
            self.logger.debug(f"Content retrieval failed: {e}")
            content = None

        if content is None:
            self.logger.warning(
                f"Unable to extract '{path}' for commit {commit.sha}"
            )
            self.output_manager.remove_artifact(target)
            return None

        self.output_manager.write_artifact(target, content)
        self.logger.info(f"Extracted file: {target}")
        return target

    def _export_patch(self, commit: Commit, path: str) -> tuple[Path | None, str | None]:
        target = self.artifact_path(commit, path, "patch")

        try:
            patch_text = self.source.get_patch(commit.sha, path)
        except RevisionSourceError as e:
            self.logger.debug(f"Patch generation failed: {e}")
            patch_text = None

        if is_empty_patch(patch_text):
            self.logger.warning(
                f"No patch generated for commit {commit.sha} (file {path})"
            )
            self.output_manager.remove_artifact(target)
            return None, None

        self.output_manager.write_artifact(target, patch_text)
        self.logger.info(f"Patch written: {target}")
        return target, patch_text

    def _export_html(self, commit: Commit, path: str, patch_text: str) -> Path | None:
        target = self.artifact_path(commit, path, "html")

        try:
            html_text = self.renderer.render(patch_text)
        except Exception as e:
            # Rendering problems never reach the caller
            self.logger.debug(f"HTML rendering failed for {commit.sha}: {e}")
            html_text = None

        if not html_text or not html_text.strip():
            self.output_manager.remove_artifact(target)
            return None

        self.output_manager.write_artifact(target, html_text)
        self.logger.info(f"HTML diff written: {target}")
        return target
