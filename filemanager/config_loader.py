import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from filemanager.schemas import Settings

DEFAULT_CONFIG_PATH = Path("config/filemanager.yaml")
CONFIG_ENV_VAR = "FILEMANAGER_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = Settings().model_dump()


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML; any problem with the file yields the defaults."""
    path = path or config_path()
    if not path.exists():
        return Settings()
    try:
        with path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return Settings()
    if not isinstance(loaded, dict):
        return Settings()
    cfg = DEFAULT_CONFIG.copy()
    cfg.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
    try:
        return Settings(**cfg)
    except ValidationError:
        return Settings()
