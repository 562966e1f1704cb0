"""
Git-backed revision source.

Every query runs one ``git`` subprocess. Machine-readable output formats are
used throughout (NUL-separated name-status, unit-separated commit fields) so
paths containing spaces or tabs survive parsing.
"""

import posixpath
import subprocess
from pathlib import Path, PurePath

from ..shared_utilities import get_logger
from .data_models import ChangeStatus, Commit, PathStatusRecord
from .exceptions import NotAGitRepositoryError, RevisionSourceError

FIELD_SEP = "\x1f"
COMMIT_FORMAT = FIELD_SEP.join(["%H", "%P", "%ct", "%an", "%ae", "%cd", "%s"])
DATE_FORMAT = "format:%Y-%m-%d %H:%M:%S"


def parse_name_status(output: str) -> list[PathStatusRecord]:
    """Parse ``git diff-tree -z --name-status`` output into records.

    The stream is a sequence of NUL-terminated tokens: a status token
    followed by one path, or two paths for renames and copies.
    """
    tokens = output.split("\0")
    if tokens and tokens[-1] == "":
        tokens.pop()

    records: list[PathStatusRecord] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if not token:
            i += 1
            continue

        status = ChangeStatus.from_token(token)
        similarity = int(token[1:]) if token[1:].isdigit() else None

        if status.has_two_paths:
            if i + 2 >= len(tokens):
                raise RevisionSourceError(f"Truncated name-status entry: {token!r}")
            records.append(
                PathStatusRecord(
                    status=status,
                    old_path=tokens[i + 1],
                    new_path=tokens[i + 2],
                    similarity=similarity,
                )
            )
            i += 3
        else:
            if i + 1 >= len(tokens):
                raise RevisionSourceError(f"Truncated name-status entry: {token!r}")
            records.append(PathStatusRecord(status=status, old_path=tokens[i + 1]))
            i += 2

    return records


def parse_commit(output: str) -> Commit:
    """Parse one ``git show -s --format=COMMIT_FORMAT`` record."""
    fields = output.rstrip("\n").split(FIELD_SEP)
    if len(fields) != 7:
        raise RevisionSourceError(f"Unexpected commit record: {output!r}")

    sha, parents, timestamp, author_name, author_email, date_human, message = fields
    return Commit(
        sha=sha,
        parents=tuple(parents.split()),
        timestamp=int(timestamp),
        author_name=author_name,
        author_email=author_email,
        message=message.strip(),
        date_human=date_human,
    )


class GitRevisionSource:
    """Reads file history from a local git working tree."""

    def __init__(
        self,
        repo_path: str | Path | None = None,
        rename_threshold: str = "1%",
        copy_threshold: str = "1%",
        git_executable: str = "git",
    ):
        """Initialize the revision source.

        Args:
            repo_path: Directory inside the working tree (default: current directory)
            rename_threshold: Similarity for rename detection, passed as -M<value>
            copy_threshold: Similarity for copy detection, passed as -C<value>
            git_executable: git binary to invoke
        """
        self.logger = get_logger(__name__)
        self.repo_path = Path(repo_path) if repo_path is not None else Path.cwd()
        self.rename_threshold = rename_threshold
        self.copy_threshold = copy_threshold
        self.git_executable = git_executable
        self.toplevel: Path | None = None
        self.prefix = ""

    @property
    def detection_args(self) -> list[str]:
        """Rename/copy options shared by the commit listing and per-commit diffs."""
        return [f"-M{self.rename_threshold}", f"-C{self.copy_threshold}"]

    def _run(self, args: list[str], text: bool = True) -> subprocess.CompletedProcess:
        cmd = [self.git_executable, *args]
        self.logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.toplevel or self.repo_path,
                capture_output=True,
                check=False,
                **({"encoding": "utf-8", "errors": "replace"} if text else {}),
            )
        except OSError as e:
            raise RevisionSourceError(f"Unable to run {self.git_executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            raise RevisionSourceError(
                f"git {args[0]} failed with exit code {result.returncode}: "
                f"{stderr.strip()}",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result

    def ensure_work_tree(self) -> None:
        """Raise NotAGitRepositoryError unless run inside a git working tree."""
        try:
            result = self._run(["rev-parse", "--is-inside-work-tree"])
        except RevisionSourceError as e:
            raise NotAGitRepositoryError(
                f"{self.repo_path} is not inside a git working tree"
            ) from e

        if result.stdout.strip() != "true":
            raise NotAGitRepositoryError(
                f"{self.repo_path} is not inside a git working tree"
            )

        # Later commands run from the root, where git reports and resolves paths
        self.prefix = self._run(["rev-parse", "--show-prefix"]).stdout.strip()
        toplevel = self._run(["rev-parse", "--show-toplevel"]).stdout.strip()
        self.toplevel = Path(toplevel)
        self.logger.debug(f"Working tree root: {toplevel} (prefix '{self.prefix}')")

    def repo_relative_path(self, path: str) -> str:
        """Express a user-supplied path relative to the working tree root.

        Relative paths are read from the directory the source was opened in;
        the result is a normalized POSIX path comparable with diff-tree output.

        Raises:
            RevisionSourceError: The path lies outside the working tree
        """
        candidate = PurePath(path)
        if candidate.is_absolute():
            root = (self.toplevel or self.repo_path).resolve()
            try:
                relative = Path(candidate).resolve().relative_to(root).as_posix()
            except ValueError as e:
                raise RevisionSourceError(
                    f"'{path}' is outside the working tree {root}"
                ) from e
        else:
            relative = posixpath.join(self.prefix, candidate.as_posix())

        normalized = posixpath.normpath(relative)
        if normalized in (".", "..") or normalized.startswith("../"):
            raise RevisionSourceError(
                f"'{path}' does not name a file in the working tree"
            )
        return normalized

    def list_commits(self, path: str) -> list[str]:
        """List the commits touching ``path``, following renames, oldest first."""
        # git walks newest first; --follow tracks renames along that walk
        result = self._run(
            ["log", "--follow", *self.detection_args, "--format=%H", "--", path]
        )
        commits = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        commits.reverse()
        return commits

    def get_commit(self, sha: str) -> Commit:
        """Fetch metadata for a single commit."""
        result = self._run(
            ["show", "-s", f"--date={DATE_FORMAT}", f"--format={COMMIT_FORMAT}", sha]
        )
        return parse_commit(result.stdout)

    def get_path_status(self, commit: Commit) -> list[PathStatusRecord]:
        """Diff ``commit`` against its first parent with rename/copy detection.

        Root commits have nothing to compare against and yield no records.
        """
        if commit.is_root:
            return []

        result = self._run(
            [
                "diff-tree",
                "-r",
                "-z",
                "--no-commit-id",
                "--name-status",
                *self.detection_args,
                commit.first_parent,
                commit.sha,
            ]
        )
        return parse_name_status(result.stdout)

    def get_content(self, sha: str, path: str) -> bytes | None:
        """Return the raw content of ``path`` at ``sha``, or None if it did not exist."""
        try:
            result = self._run(["show", f"{sha}:{path}"], text=False)
        except RevisionSourceError as e:
            self.logger.debug(f"No content for {path} at {sha}: {e}")
            return None
        return result.stdout

    def get_patch(self, sha: str, path: str) -> str:
        """Return the patch ``sha`` introduced, restricted to ``path``."""
        result = self._run(
            ["show", "--patch", "--no-color", "--format=full", sha, "--", path]
        )
        return result.stdout
