from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from .models import ConfigMetadata

load_dotenv()

CONFIG_ENV_VAR = "INSPECTION_REPORT_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config" / "config.yaml"

NOTES = {
    "inspection": "Ordered mapping of checkpoint name to entry; the report follows insertion order.",
    "status": "G, F or P (Good, Fair, Poor); the full words are accepted too.",
    "file": "Optional photo as {name, dataUrl}; dataUrl is a base64 data URL of at most 5MB.",
    "signature": "PNG data URL; an empty string means the customer has not signed.",
}


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def _load_default_config() -> DictConfig:
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Report config not found at {config_path}")
    return OmegaConf.load(config_path)


def get_default_config_container(resolve: bool = False) -> Dict[str, Any]:
    config = _load_default_config()
    return OmegaConf.to_container(config, resolve=resolve, enum_to_str=True)  # type: ignore[return-value]


def build_config_metadata() -> ConfigMetadata:
    defaults = get_default_config_container(resolve=True)

    return ConfigMetadata(
        defaults=defaults,
        statuses=defaults.get("statuses", {}),
        checklist_groups=defaults.get("checklist_groups", {}),
        terms=defaults.get("terms", []),
        notes=NOTES,
    )


def make_report_config(overrides: Optional[Dict[str, Any]] = None) -> DictConfig:
    base_container = OmegaConf.to_container(_load_default_config(), resolve=False)
    base = OmegaConf.create(base_container)
    OmegaConf.set_struct(base, True)

    merged = DictConfig(OmegaConf.merge(base, OmegaConf.create(overrides or {})))
    OmegaConf.set_readonly(merged, True)
    return merged
