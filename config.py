"""
Configuration module for the Recruit Metrics reporting server.

Provides centralized configuration management with support for:
- Environment variables
- Default values
- Reporting jurisdiction and timezone
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables from .env file at project root
_env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _parse_bool(env_var: str, default: bool) -> bool:
    """Parse a boolean value from an environment variable."""
    value = os.getenv(env_var)
    if value is None:
        return default
    return value.lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Configuration class for reporting engine settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    Relative paths are resolved against the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self._repo_root = Path(__file__).resolve().parent

        # Logging configuration
        self.log_level = os.getenv("RECRUIT_METRICS_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_optional_path("RECRUIT_METRICS_LOG_FILE")

        # Server configuration
        self.server_name = os.getenv("RECRUIT_METRICS_SERVER_NAME", "recruit-metrics-mcp-server")

        # Tax jurisdiction: billing states matching this one are split CGST + SGST
        self.home_state = os.getenv("RECRUIT_METRICS_HOME_STATE", "Karnataka").strip()

        # Calendar days in date ranges are interpreted in this zone
        self.report_timezone = os.getenv("RECRUIT_METRICS_TIMEZONE", "Asia/Kolkata")

        # Status group presets
        self.presets_file = self._resolve_optional_path("RECRUIT_METRICS_PRESETS_FILE")
        self.default_preset = os.getenv("RECRUIT_METRICS_DEFAULT_PRESET", "performance")

        # Diagnostics
        self.include_unclassified = _parse_bool("RECRUIT_METRICS_INCLUDE_UNCLASSIFIED", False)

    def _resolve_optional_path(self, env_var: str) -> Optional[Path]:
        """
        Resolve an optional file path from the environment.

        Returns:
            Absolute Path, or None when the variable is unset
        """
        raw = os.getenv(env_var)
        if not raw:
            return None

        path = Path(raw)
        if path.is_absolute():
            return path
        return self._repo_root / path

    def get_timezone(self) -> ZoneInfo:
        """
        Get the reporting timezone, falling back to UTC when it is unknown.

        Returns:
            ZoneInfo for report_timezone
        """
        try:
            return ZoneInfo(self.report_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return ZoneInfo("UTC")

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file.
        Log level is controlled by RECRUIT_METRICS_LOG_LEVEL.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Home tax state: {self.home_state}")
        logging.info(f"Report timezone: {self.report_timezone}")

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        try:
            ZoneInfo(self.report_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            warnings.append(
                f"Unknown timezone '{self.report_timezone}'. Falling back to UTC."
            )

        if not self.home_state:
            warnings.append("Home tax state is empty; every invoice will be taxed as IGST.")

        if self.presets_file and not self.presets_file.exists():
            warnings.append(
                f"Presets file not found: {self.presets_file}. Pipeline reports will fail until it exists."
            )

        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


# Global configuration instance
config = Config()


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global Config instance
    """
    return config
