"""Tests for file history configuration."""

from pathlib import Path

import pytest

from src.git_file_history.config import (
    HistoryConfig,
    parse_bool,
    validate_threshold,
)
from src.git_file_history.data_models import MatchPolicy, TraversalDirection
from src.git_file_history.exceptions import ConfigurationError


class TestHistoryConfig:
    """Test HistoryConfig dataclass."""

    def test_default_initialization(self):
        config = HistoryConfig()

        assert config.filename == "cdc.md"
        assert config.rename_threshold == "1%"
        assert config.copy_threshold == "1%"
        assert config.enable_html_diff is False
        assert config.html_renderer == "diff2html"
        assert config.output_dir == Path("versions_of_cdc.md")
        assert config.summary_file == Path("versions_of_cdc.md/summary.txt")
        assert config.direction is TraversalDirection.BACKWARD
        assert config.match_policy is MatchPolicy.LAST
        assert config.content_extension == "md"

    def test_nested_filename_gives_flat_output_dir(self):
        config = HistoryConfig(filename="docs/specs/cdc.md")

        assert config.output_dir == Path("versions_of_docs_specs_cdc.md")

    def test_string_enums_are_coerced(self):
        config = HistoryConfig(direction="forward", match_policy="first")

        assert config.direction is TraversalDirection.FORWARD
        assert config.match_policy is MatchPolicy.FIRST

    @pytest.mark.parametrize(
        "field,value",
        [
            ("rename_threshold", "fifty"),
            ("copy_threshold", "150%"),
            ("html_renderer", "word"),
            ("direction", "sideways"),
            ("match_policy", "random"),
            ("content_extension", "."),
            ("filename", "  "),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ConfigurationError):
            HistoryConfig(**{field: value})


class TestFromEnv:
    """Test loading configuration from environment variables."""

    def test_defaults_without_environment(self):
        config = HistoryConfig.from_env("notes.md", environ={})

        assert config.filename == "notes.md"
        assert config.rename_threshold == "1%"
        assert config.enable_html_diff is False
        assert config.repo_path is None

    def test_reads_all_variables(self):
        environ = {
            "RENAME_THRESHOLD": "50%",
            "COPY_THRESHOLD": "70%",
            "ENABLE_HTML_DIFF": "1",
            "HTML_RENDERER": "pygments",
            "OUTPUT_DIR": "exports",
            "TRAVERSAL_DIRECTION": "FORWARD",
            "MATCH_POLICY": "first",
            "CONTENT_EXTENSION": "txt",
            "GIT_FILE_HISTORY_REPO": "/srv/repo",
        }

        config = HistoryConfig.from_env("notes.md", environ=environ)

        assert config.rename_threshold == "50%"
        assert config.copy_threshold == "70%"
        assert config.enable_html_diff is True
        assert config.html_renderer == "pygments"
        assert config.output_dir == Path("exports")
        assert config.direction is TraversalDirection.FORWARD
        assert config.match_policy is MatchPolicy.FIRST
        assert config.content_extension == "txt"
        assert config.repo_path == Path("/srv/repo")

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("RENAME_THRESHOLD", "30%")

        assert HistoryConfig.from_env().rename_threshold == "30%"

    def test_invalid_flag(self):
        with pytest.raises(ConfigurationError):
            HistoryConfig.from_env(environ={"ENABLE_HTML_DIFF": "maybe"})


@pytest.mark.parametrize(
    "value,expected",
    [("1", True), ("true", True), ("ON", True), ("0", False), ("", False), (None, False)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


@pytest.mark.parametrize("value", ["1%", "50%", "100%", "50", "0.5", " 40% "])
def test_valid_thresholds(value):
    assert validate_threshold(value) == value.strip()
