"""Configuration management for the component extractor.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

__version__ = "1.0.0"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: Optional[str | Path] = None):
        """Initialize config by loading a .env file.

        Args:
            env_path: .env file to load (default: .env in the working directory)
        """
        load_dotenv(Path(env_path) if env_path else Path.cwd() / ".env")

    @property
    def output_dir(self) -> str:
        """Default destination for extracted components.

        Returns:
            Output directory path string
        """
        return os.getenv("EXTRACTOR_OUTPUT_DIR", "./extracted")

    @property
    def source_root(self) -> str:
        """Directory that bare import specifiers are resolved under.

        Returns:
            Project-relative directory (e.g. 'src')
        """
        return os.getenv("EXTRACTOR_SOURCE_ROOT", "src")

    @property
    def excluded_dirs(self) -> list[str]:
        """Extra directory names skipped by the project scan.

        Returns:
            List of directory names from EXTRACTOR_EXCLUDED_DIRS (comma-separated)
        """
        raw = os.getenv("EXTRACTOR_EXCLUDED_DIRS", "")
        return [name.strip() for name in raw.split(",") if name.strip()]

    @property
    def log_level(self) -> str:
        return os.getenv("EXTRACTOR_LOG_LEVEL", "WARNING").upper()

    @property
    def write_manifest(self) -> bool:
        """Whether to persist the extraction ledger as JSON in the output directory."""
        return os.getenv("EXTRACTOR_WRITE_MANIFEST", "").lower() in ("1", "true", "yes", "on")


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
