"""
Shared filename generation utilities for consistent artifact naming
"""

from pathlib import Path, PurePosixPath

OUTPUT_DIR_PREFIX = "versions_of_"


def generate_artifact_filename(
    timestamp: int,
    commit_sha: str,
    path: str,
    extension: str,
) -> str:
    """
    Generate the filename of a per-commit artifact.

    Format: ``<timestamp>_<commit>_<basename>.<extension>``. The commit id keeps
    two paths sharing a basename apart, and nothing time-dependent enters the
    name, so re-runs produce the same filenames.

    Args:
        timestamp: Commit timestamp (seconds since epoch)
        commit_sha: Full commit id
        path: Repository path the artifact was extracted from
        extension: File extension without the leading dot

    Returns:
        Generated filename string
    """
    base_name = get_safe_filename(PurePosixPath(path).name) or "unnamed"
    extension = extension.lstrip(".")
    return f"{timestamp}_{commit_sha}_{base_name}.{extension}"


def generate_output_dirname(filename: str) -> str:
    """
    Generate the default output directory name for a tracked file.

    Args:
        filename: Tracked repository path, e.g. "docs/cdc.md"

    Returns:
        Directory name, e.g. "versions_of_docs_cdc.md"
    """
    normalized = PurePosixPath(filename.strip("/")).as_posix()
    return f"{OUTPUT_DIR_PREFIX}{get_safe_filename(normalized)}"


def ensure_output_directory(file_path: str | Path) -> Path:
    """
    Ensure the directory for the output file exists.

    Args:
        file_path: Path to the output file

    Returns:
        Path object for the file
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_safe_filename(filename: str) -> str:
    """
    Convert any string to a safe filename by removing/replacing problematic characters.

    Args:
        filename: Raw filename string

    Returns:
        Safe filename string
    """
    # Replace spaces with underscores
    safe_name = filename.replace(" ", "_")

    problematic_chars = {
        "/": "_",
        "\\": "_",
        ":": "_",
        "*": "_",
        "?": "_",
        '"': "_",
        "<": "_",
        ">": "_",
        "|": "_",
        "\n": "_",
        "\r": "_",
        "\t": "_",
        "\0": "_",
    }

    for char, replacement in problematic_chars.items():
        safe_name = safe_name.replace(char, replacement)

    # Remove multiple consecutive underscores
    while "__" in safe_name:
        safe_name = safe_name.replace("__", "_")

    # Remove leading/trailing underscores
    return safe_name.strip("_")
