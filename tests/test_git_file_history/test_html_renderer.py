"""Tests for the HTML renderers."""

import subprocess
from unittest.mock import patch

import pytest

from src.git_file_history.exceptions import ConfigurationError
from src.git_file_history.html_renderer import (
    Diff2HtmlRenderer,
    PygmentsHtmlRenderer,
    create_renderer,
)

PATCH = (
    "commit abc123\n\n"
    "diff --git a/notes.md b/notes.md\n"
    "--- a/notes.md\n+++ b/notes.md\n"
    "@@ -1 +1 @@\n-old <line>\n+new line\n"
)


class TestCreateRenderer:
    def test_known_renderers(self):
        assert isinstance(create_renderer("diff2html"), Diff2HtmlRenderer)
        assert isinstance(create_renderer("Pygments"), PygmentsHtmlRenderer)

    def test_unknown_renderer(self):
        with pytest.raises(ConfigurationError):
            create_renderer("nope")


class TestDiff2HtmlRenderer:
    def test_unavailable_when_binary_missing(self):
        renderer = Diff2HtmlRenderer()

        with patch("shutil.which", return_value=None):
            assert renderer.is_available() is False
            assert renderer.render(PATCH) is None

    def test_render_uses_stdin_and_stdout(self):
        renderer = Diff2HtmlRenderer()
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="<html>ok</html>", stderr=""
        )

        with (
            patch("shutil.which", return_value="/usr/bin/diff2html"),
            patch("subprocess.run", return_value=completed) as run,
        ):
            html = renderer.render(PATCH)

        assert html == "<html>ok</html>"
        cmd = run.call_args.args[0]
        assert cmd == ["/usr/bin/diff2html", "-i", "stdin", "-o", "stdout"]
        assert run.call_args.kwargs["input"] == PATCH

    @pytest.mark.parametrize(
        "returncode,stdout", [(1, "<html>partial</html>"), (0, ""), (0, "  \n")]
    )
    def test_failures_and_empty_output_return_none(self, returncode, stdout):
        renderer = Diff2HtmlRenderer()
        completed = subprocess.CompletedProcess(
            args=[], returncode=returncode, stdout=stdout, stderr="error"
        )

        with (
            patch("shutil.which", return_value="/usr/bin/diff2html"),
            patch("subprocess.run", return_value=completed),
        ):
            assert renderer.render(PATCH) is None

    def test_os_error_returns_none(self):
        renderer = Diff2HtmlRenderer()

        with (
            patch("shutil.which", return_value="/usr/bin/diff2html"),
            patch("subprocess.run", side_effect=OSError("exec format error")),
        ):
            assert renderer.render(PATCH) is None


class TestPygmentsHtmlRenderer:
    def test_always_available(self):
        assert PygmentsHtmlRenderer().is_available() is True

    def test_renders_full_document(self):
        html = PygmentsHtmlRenderer().render(PATCH)

        assert html is not None
        assert "<html" in html.lower()
        assert "commit abc123" in html
        assert "&lt;line&gt;" in html

    def test_empty_patch(self):
        assert PygmentsHtmlRenderer().render("  \n") is None
