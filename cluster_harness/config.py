"""
Loading harness settings from YAML or JSON files
"""
import json
import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict
from .models import HarnessConfig


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file"""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif path.suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping, got {type(data).__name__}")
    return data


def harness_config_from_dict(data: Dict[str, Any]) -> HarnessConfig:
    known = {f.name for f in fields(HarnessConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown harness config keys: {', '.join(unknown)}")
    return HarnessConfig(**data)


def load_harness_config(config_path: str) -> HarnessConfig:
    return harness_config_from_dict(load_config_file(config_path))
