# pyminotar/settings.py
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from config import SKIN_CACHE_DIR
from .exceptions import ConfigLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MinotarConfig:
    disk_cache: bool = False
    error_logging: bool = True
    access_logging: bool = False
    cache_dir: Path = SKIN_CACHE_DIR


def load_configuration(path: Path) -> MinotarConfig:
    """
    Reads the runtime switches from a JSON file.

    A file that cannot be read falls back to the defaults. A file that can be
    read but is not a JSON object is a hard error, so a typo never silently
    turns the disk cache off.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError:
        logger.info("No configuration at %s, using defaults", path)
        return MinotarConfig()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}", details={"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path} must contain a JSON object", details={"path": str(path)})

    cache_dir = data.get("cache_dir")
    return MinotarConfig(
        disk_cache=bool(data.get("disk_cache", False)),
        error_logging=bool(data.get("error_logging", True)),
        access_logging=bool(data.get("access_logging", False)),
        cache_dir=Path(cache_dir) if cache_dir else SKIN_CACHE_DIR,
    )
