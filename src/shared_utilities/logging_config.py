"""
Centralized logging configuration for git-file-history.

Provides structured logging with OpenTelemetry integration and consistent
formatting across all components.
"""

import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from .telemetry import get_telemetry_manager


def _stderr_sink(message: str) -> None:
    # Looked up per message so a replaced sys.stderr (click runner, pytest) is honoured
    sys.stderr.write(message)


class LoggingManager:
    """Manages centralized logging configuration across the tool."""

    def __init__(self, service_name: str = "git-file-history"):
        """
        Initialize logging manager.

        Args:
            service_name: Name of the service for logging identification
        """
        self.service_name = service_name
        self.telemetry_manager = get_telemetry_manager()
        self._configured = False

    def configure_logging(
        self,
        level: str = "INFO",
        enable_file_logging: bool = False,
        log_file_path: Path | None = None,
        structured_format: bool = False,
        force: bool = False,
    ) -> None:
        """
        Configure logging for the entire application.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            enable_file_logging: Whether to enable file logging
            log_file_path: Path for log file (auto-generated if None)
            structured_format: Whether to append the bound extras to each line
            force: Reconfigure even if logging was already configured
        """
        if self._configured and not force:
            return

        # Remove default loguru handler
        logger.remove()

        console_format = self._get_console_format(structured_format)
        logger.add(
            _stderr_sink,
            format=console_format,
            level=level,
            colorize=sys.stderr.isatty(),
            backtrace=True,
            diagnose=False,
        )

        if enable_file_logging:
            if log_file_path is None:
                log_file_path = Path.cwd() / "logs" / f"{self.service_name}.log"

            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            logger.add(
                str(log_file_path),
                format=self._get_file_format(structured_format),
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="gz",
                backtrace=True,
                diagnose=False,
                serialize=structured_format,
            )

        logger.configure(extra={"service_name": self.service_name})

        self._configured = True
        logger.debug(
            "Logging configured",
            service=self.service_name,
            level=level,
            file_logging=enable_file_logging,
            structured=structured_format,
        )

    def _get_console_format(self, structured: bool) -> str:
        """Get console logging format."""
        if structured:
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level> | "
                "{extra}"
            )
        return "<level>{level: <8}</level> | <level>{message}</level>"

    def _get_file_format(self, structured: bool) -> str:
        """Get file logging format."""
        if structured:
            # JSON format handled by serialize=True
            return "{time} | {level} | {name}:{function}:{line} | {message} | {extra}"
        return (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
            "{name}:{function}:{line} | {message}"
        )

    def get_logger(self, name: str) -> Any:
        """
        Get a logger instance with the given name.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Configured logger instance
        """
        return logger.bind(component=name)


# Global logging manager instance
_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    """Get or create the global logging manager instance."""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(
    level: str | None = None,
    structured: bool = False,
    enable_file_logging: bool | None = None,
    force: bool = False,
) -> None:
    """
    Configure application logging with sensible defaults.

    Args:
        level: Logging level, falls back to LOG_LEVEL or INFO
        structured: Append bound extras / emit JSON to the log file
        enable_file_logging: Enable file logging, falls back to ENABLE_FILE_LOGGING
        force: Reconfigure an already configured logger
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    # Off by default: the tool runs inside the repository being inspected
    if enable_file_logging is None:
        enable_file_logging = (
            os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true"
        )

    manager = get_logging_manager()
    manager.configure_logging(
        level=level,
        structured_format=structured,
        enable_file_logging=enable_file_logging,
        force=force,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given component.

    Args:
        name: Component name (usually __name__)

    Returns:
        Configured logger instance
    """
    manager = get_logging_manager()
    return manager.get_logger(name)
