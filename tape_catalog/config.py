"""Configuration for catalog reconstruction.

All env-var reading is centralised here. load_dotenv() runs at import time
so the class attrs below pick up values from a .env file if present.

Relative paths are resolved against TAPE_CATALOG_CONFIG_DIR, the directory
of the backup configuration; absolute paths are used as given.
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Load .env on import.  Calling this multiple times is harmless.
load_dotenv(find_dotenv(usecwd=True))


def _truthy(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class CatalogConfig:
    # ------------------------------------------------------------ Locations
    CONFIG_DIR = Path(os.getenv("TAPE_CATALOG_CONFIG_DIR", "."))
    LOG_DIR = os.getenv("TAPE_CATALOG_LOGDIR", "log")
    TAPELIST = os.getenv("TAPE_CATALOG_TAPELIST", "tapelist")
    DISKLIST = os.getenv("TAPE_CATALOG_DISKLIST", "disklist")

    # os.pathsep-separated list, may be empty
    HOLDING_DIRS = [d for d in os.getenv("TAPE_CATALOG_HOLDING_DIRS", "").split(os.pathsep) if d]

    # ------------------------------------------------------------ Behaviour
    DYNAMIC_DISKLIST = _truthy(os.getenv("TAPE_CATALOG_DYNAMIC_DISKLIST", "false"))
    SORT_ORDER = os.getenv("TAPE_CATALOG_SORT_ORDER", "hkdlpbf")

    @classmethod
    def resolve_path(cls, value: str | Path, config_dir: str | Path | None = None) -> Path:
        """Return *value* as an absolute-or-config-relative path.

        Args:
            value: Path from the environment or the command line
            config_dir: Base for relative paths (defaults to CONFIG_DIR)
        """
        path = Path(value)
        if path.is_absolute():
            return path
        return Path(config_dir if config_dir is not None else cls.CONFIG_DIR) / path
