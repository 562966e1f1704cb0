"""
Patch to HTML renderers.

A renderer either returns HTML or None; None covers "produced nothing usable"
and is never an error for the caller. Availability is reported separately
through ``is_available()`` so a missing binary can be announced once per run.
"""

import html
import shutil
import subprocess
from abc import ABC, abstractmethod

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers.diff import DiffLexer

from ..shared_utilities import get_logger
from .exceptions import ConfigurationError

logger = get_logger(__name__)


class HtmlRenderer(ABC):
    """Renders a unified diff to an HTML document."""

    name: str = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the renderer can run in this environment."""

    @abstractmethod
    def render(self, patch_text: str) -> str | None:
        """Render ``patch_text``; None when the output is empty or rendering failed."""


class Diff2HtmlRenderer(HtmlRenderer):
    """Delegates to the external ``diff2html`` command line tool."""

    name = "diff2html"

    def __init__(self, executable: str = "diff2html", timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout
        self._resolved: str | None = None

    def is_available(self) -> bool:
        if self._resolved is None:
            self._resolved = shutil.which(self.executable) or ""
        return bool(self._resolved)

    def render(self, patch_text: str) -> str | None:
        if not self.is_available():
            return None

        try:
            result = subprocess.run(
                [self._resolved, "-i", "stdin", "-o", "stdout"],
                input=patch_text,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"diff2html failed to run: {e}")
            return None

        if result.returncode != 0:
            logger.debug(
                f"diff2html exited with {result.returncode}: {result.stderr.strip()}"
            )
            return None

        return result.stdout if result.stdout.strip() else None


class PygmentsHtmlRenderer(HtmlRenderer):
    """Renders the patch in-process with pygments' diff lexer."""

    name = "pygments"

    def __init__(self, style: str = "default"):
        self.style = style

    def is_available(self) -> bool:
        return True

    def render(self, patch_text: str) -> str | None:
        if not patch_text.strip():
            return None

        title = html.escape(_patch_title(patch_text))
        formatter = HtmlFormatter(full=True, title=title, style=self.style)
        return highlight(patch_text, DiffLexer(), formatter)


def _patch_title(patch_text: str) -> str:
    """Use the commit line of a ``git show`` patch as the page title."""
    for line in patch_text.splitlines():
        if line.startswith("commit "):
            return line
    return "patch"


RENDERERS: dict[str, type[HtmlRenderer]] = {
    Diff2HtmlRenderer.name: Diff2HtmlRenderer,
    PygmentsHtmlRenderer.name: PygmentsHtmlRenderer,
}


def create_renderer(name: str) -> HtmlRenderer:
    """Instantiate a renderer by name."""
    try:
        renderer_cls = RENDERERS[name.strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown HTML renderer {name!r}, expected one of: {', '.join(RENDERERS)}"
        ) from None
    return renderer_cls()
