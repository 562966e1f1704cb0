"""
Exceptions raised by the file history tools.
"""


class FileHistoryError(Exception):
    """Base exception for file history operations."""

    pass


class ConfigurationError(FileHistoryError):
    """Invalid configuration value."""

    pass


class RevisionSourceError(FileHistoryError):
    """A git command failed."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class NotAGitRepositoryError(RevisionSourceError):
    """The working directory is not inside a git working tree."""

    pass
