"""
Core file history extraction.

Runs in two phases. Phase one folds the tracked path over the commit list
(strictly sequential, every step depends on the previous one). Phase two walks
the resolved (commit, path) pairs oldest-first, exporting artifacts and
appending summary records.
"""

from collections.abc import Callable, Iterator

from ..shared_utilities import OutputManager, get_logger
from ..shared_utilities.telemetry import trace_function, trace_operation
from .config import SUMMARY_FILENAME, HistoryConfig
from .data_models import (
    Commit,
    ExtractionResult,
    PathResolution,
    PathStatusRecord,
    TraversalDirection,
)
from .exceptions import RevisionSourceError
from .exporter import RevisionExporter
from .html_renderer import HtmlRenderer, create_renderer
from .path_tracker import track_paths
from .revision_source import GitRevisionSource
from .summary_writer import SummaryWriter

ProgressCallback = Callable[[int, int, str], None]


class FileHistoryExtractor:
    """
    Extracts every revision of one file, following renames and copies.

    Collaborators can be injected for testing; by default the revision source
    is git in ``config.repo_path`` and the renderer is picked from the config.
    """

    def __init__(
        self,
        config: HistoryConfig,
        source: GitRevisionSource | None = None,
        renderer: HtmlRenderer | None = None,
        output_manager: OutputManager | None = None,
    ):
        """Initialize the extractor.

        Args:
            config: Run configuration
            source: Revision source (default: GitRevisionSource with config thresholds)
            renderer: HTML renderer used when HTML output is enabled
            output_manager: Output directory manager
        """
        self.logger = get_logger(__name__)
        self.config = config
        self.source = source or GitRevisionSource(
            repo_path=config.repo_path,
            rename_threshold=config.rename_threshold,
            copy_threshold=config.copy_threshold,
        )
        self._renderer = renderer
        self.output_manager = output_manager or OutputManager()

    def select_renderer(self) -> tuple[HtmlRenderer | None, bool]:
        """Pick the HTML renderer for this run.

        Returns:
            (renderer or None, whether the requested renderer is available)
        """
        if not self.config.enable_html_diff:
            return None, False

        renderer = self._renderer or create_renderer(self.config.html_renderer)
        if renderer.is_available():
            self.logger.info(f"{renderer.name} detected: HTML diffs will be generated")
            return renderer, True

        self.logger.warning(
            f"HTML diffs requested but {renderer.name} is not available, "
            "continuing in patch-only mode"
        )
        return None, False

    def _path_status(self, commit: Commit) -> list[PathStatusRecord]:
        try:
            return self.source.get_path_status(commit)
        except RevisionSourceError as e:
            self.logger.warning(f"Could not diff {commit.sha} against its parent: {e}")
            return []

    def _fold_steps(
        self, commits: list[Commit]
    ) -> Iterator[tuple[str, list[PathStatusRecord]]]:
        for commit in commits:
            yield commit.sha, self._path_status(commit)

    def resolve_paths(
        self, commits: list[Commit], tracked_path: str | None = None
    ) -> list[PathResolution]:
        """Resolve the tracked path for every commit.

        Args:
            commits: Commits touching the file, oldest first
            tracked_path: Root-relative path the walk starts from
                (default: the configured filename)

        Returns:
            One PathResolution per commit, oldest first
        """
        backward = self.config.direction is TraversalDirection.BACKWARD
        ordered = list(reversed(commits)) if backward else list(commits)

        with trace_operation(
            "resolve_paths",
            {"commits": len(commits), "direction": self.config.direction.value},
        ):
            resolutions = [
                resolution
                for _, resolution in track_paths(
                    self.config.filename,
                    self._fold_steps(ordered),
                    self.config.match_policy,
                )
            ]

        if backward:
            resolutions.reverse()
        return resolutions

    @trace_function("extract_file_history")
    def extract(self, progress_callback: ProgressCallback | None = None) -> ExtractionResult:
        """Run a complete extraction.

        Args:
            progress_callback: Called as (current, total, message) for every commit

        Returns:
            ExtractionResult describing everything written

        Raises:
            NotAGitRepositoryError: Not run inside a git working tree
            RevisionSourceError: The file lies outside the working tree, or the
                commit list or commit metadata could not be read
        """
        config = self.config
        self.source.ensure_work_tree()
        tracked_path = self.source.repo_relative_path(config.filename)
        if tracked_path != config.filename:
            self.logger.info(f"Tracking '{config.filename}' as '{tracked_path}'")

        self.logger.info(
            f"Rename/copy detection: -M{config.rename_threshold} "
            f"-C{config.copy_threshold}"
        )
        renderer, html_available = self.select_renderer()

        summary_path = self.output_manager.prepare(config.output_dir, SUMMARY_FILENAME)
        summary = SummaryWriter(summary_path)
        summary.reset()

        result = ExtractionResult(
            filename=config.filename,
            output_dir=summary_path.parent,
            summary_file=summary_path,
            html_enabled=config.enable_html_diff,
            html_available=html_available,
        )

        self.logger.info(f"Listing commits for '{tracked_path}'")
        shas = self.source.list_commits(tracked_path)
        if not shas:
            self.logger.info(f"No commit found for file '{config.filename}'")
            return result

        self.logger.info(f"{len(shas)} commits to process (oldest first)")
        commits = [self.source.get_commit(sha) for sha in shas]
        result.resolutions = self.resolve_paths(commits, tracked_path)

        exporter = RevisionExporter(
            self.source,
            result.output_dir,
            content_extension=config.content_extension,
            renderer=renderer,
            output_manager=self.output_manager,
        )

        total = len(commits)
        for index, (commit, resolution) in enumerate(
            zip(commits, result.resolutions, strict=True), start=1
        ):
            if progress_callback:
                progress_callback(
                    index, total, f"{commit.sha} -> {resolution.resolved_path}"
                )

            artifact = exporter.export(commit, resolution.resolved_path)
            summary.append(commit, artifact)
            result.artifacts.append(artifact)

        self.logger.info(
            f"Extraction complete: {result.content_count} files, "
            f"{result.patch_count} patches, {result.html_count} HTML diffs"
        )
        return result
