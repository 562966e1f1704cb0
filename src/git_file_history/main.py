"""
Main CLI entry point for file history extraction.
"""

import os
import sys

import click
from dotenv import load_dotenv

from ..shared_utilities import configure_logging, get_logger
from ..shared_utilities.telemetry import trace_function
from .config import DEFAULT_FILENAME, HTML_RENDERERS, HistoryConfig
from .core import FileHistoryExtractor
from .data_models import ExtractionResult
from .exceptions import (
    ConfigurationError,
    NotAGitRepositoryError,
    RevisionSourceError,
)

# Load environment variables from .env file
load_dotenv()

DIFF2HTML_INSTALL_HINT = "npm install -g diff2html-cli"


class ProgressIndicator:
    """Simple progress indicator for CLI operations."""

    def __init__(self, quiet: bool = False):
        """Initialize progress indicator.

        Args:
            quiet: If True, suppress progress output
        """
        self.quiet = quiet

    def update(self, current: int, total: int, message: str) -> None:
        """Update progress display."""
        if self.quiet:
            return

        if total > 0:
            percentage = (current / total) * 100
            click.echo(f"[{percentage:6.1f}%] {message}", err=True)
        else:
            click.echo(f"[  ---  ] {message}", err=True)


def print_report(result: ExtractionResult, config: HistoryConfig) -> None:
    """Print the closing report of a run."""
    click.echo("-" * 41)
    click.echo("Extraction complete!")
    click.echo(
        f"{result.total_commits} commits processed: {result.content_count} versions, "
        f"{result.patch_count} patches, {result.html_count} HTML diffs"
    )
    click.echo("All versions of the file (including renames) are in:")
    click.echo(f"  {result.output_dir}/")
    click.echo("See the summary file for the complete list:")
    click.echo(f"  {result.summary_file}")

    if config.enable_html_diff and not result.html_available:
        if config.html_renderer == "diff2html":
            click.echo(
                f"To generate HTML diffs, install diff2html ({DIFF2HTML_INSTALL_HINT}) "
                "or use --html-renderer pygments."
            )
        else:
            click.echo(f"HTML renderer '{config.html_renderer}' was not available.")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("filename", default=DEFAULT_FILENAME, required=False)
@click.option(
    "--rename-threshold",
    help="Minimum similarity for a rename, e.g. 50% (env: RENAME_THRESHOLD, default 1%)",
)
@click.option(
    "--copy-threshold",
    help="Minimum similarity for a copy, e.g. 50% (env: COPY_THRESHOLD, default 1%)",
)
@click.option(
    "--html/--no-html",
    "enable_html",
    default=None,
    help="Render each patch to HTML (env: ENABLE_HTML_DIFF=1)",
)
@click.option(
    "--html-renderer",
    type=click.Choice(HTML_RENDERERS),
    help="HTML renderer (env: HTML_RENDERER, default diff2html)",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False),
    help="Output directory (env: OUTPUT_DIR, default versions_of_<filename>)",
)
@click.option(
    "--direction",
    type=click.Choice(["backward", "forward"]),
    help="Walk renames from the newest commit (backward) or the oldest (forward)",
)
@click.option(
    "--match-policy",
    type=click.Choice(["last", "first"]),
    help="Record kept when several diff entries match the tracked path",
)
@click.option(
    "--content-extension",
    help="Extension of the extracted versions (env: CONTENT_EXTENSION, default md)",
)
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False),
    help="Directory inside the git working tree (default: current directory)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress progress indicators",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@trace_function("git_file_history_main", include_args=True)
def main(
    filename: str,
    rename_threshold: str | None,
    copy_threshold: str | None,
    enable_html: bool | None,
    html_renderer: str | None,
    output_dir: str | None,
    direction: str | None,
    match_policy: str | None,
    content_extension: str | None,
    repo_path: str | None,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Extract every version of FILENAME from the git history.

    Follows renames and copies, writes the file content and the patch of each
    commit (plus an optional HTML diff) and a summary.txt listing commits,
    timestamps, authors, messages and extracted files. FILENAME defaults to
    cdc.md.

    Environment variables: RENAME_THRESHOLD, COPY_THRESHOLD (default 1%),
    ENABLE_HTML_DIFF (default 0), HTML_RENDERER, OUTPUT_DIR,
    TRAVERSAL_DIRECTION, MATCH_POLICY, CONTENT_EXTENSION. Command line options
    take precedence.

    Examples:

    \b
        # Track docs/cdc.md with stricter rename detection and HTML diffs
        RENAME_THRESHOLD=50% COPY_THRESHOLD=50% ENABLE_HTML_DIFF=1 \\
            git-file-history docs/cdc.md

    \b
        # Same, without a diff2html install
        git-file-history docs/cdc.md --html --html-renderer pygments
    """
    if verbose:
        configure_logging(level="DEBUG", force=True)
    elif quiet:
        configure_logging(level="WARNING", force=True)
    else:
        configure_logging()
    logger = get_logger(__name__)

    # Options take the place of their environment variables before validation
    overrides = {
        "RENAME_THRESHOLD": rename_threshold,
        "COPY_THRESHOLD": copy_threshold,
        "ENABLE_HTML_DIFF": None if enable_html is None else str(int(enable_html)),
        "HTML_RENDERER": html_renderer,
        "OUTPUT_DIR": output_dir,
        "TRAVERSAL_DIRECTION": direction,
        "MATCH_POLICY": match_policy,
        "CONTENT_EXTENSION": content_extension,
        "GIT_FILE_HISTORY_REPO": repo_path,
    }
    environ = dict(os.environ)
    environ.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = HistoryConfig.from_env(filename, environ=environ)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    progress = ProgressIndicator(quiet=quiet)
    extractor = FileHistoryExtractor(config)

    try:
        result = extractor.extract(progress_callback=progress.update)
    except NotAGitRepositoryError:
        click.echo(
            "Error: this command must be run inside a git repository.", err=True
        )
        sys.exit(1)
    except RevisionSourceError as e:
        logger.error(f"git failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result.total_commits == 0:
        click.echo(f"No commit found for file '{config.filename}'.")
        return

    print_report(result, config)


if __name__ == "__main__":
    main()
