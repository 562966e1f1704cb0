"""
Common utilities shared across tools
"""

from .filename_generator import (
    ensure_output_directory,
    generate_artifact_filename,
    generate_output_dirname,
    get_safe_filename,
)
from .logging_config import configure_logging, get_logger, get_logging_manager
from .output_manager import OutputManager
from .telemetry import get_telemetry_manager, trace_function, trace_operation

__all__ = [
    "configure_logging",
    "get_logger",
    "get_logging_manager",
    "get_telemetry_manager",
    "trace_function",
    "trace_operation",
    "OutputManager",
    "ensure_output_directory",
    "generate_artifact_filename",
    "generate_output_dirname",
    "get_safe_filename",
]
