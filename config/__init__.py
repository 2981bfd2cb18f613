# PATH: config/__init__.py
"""
Configuration loading utilities for ARBWATCH.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


CONFIG_DIR = Path(__file__).parent


def resolve_config_path(filename: Union[str, Path]) -> Path:
    """
    Resolve a config file name.
    
    Existing or absolute paths are used as given; bare names are looked up
    in the config directory.
    """
    filepath = Path(filename)
    if filepath.is_absolute() or filepath.exists():
        return filepath
    return CONFIG_DIR / filepath


def load_yaml(filename: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML configuration file.
    
    Args:
        filename: Path, or name of file in config directory
        
    Returns:
        Parsed YAML as dict
    """
    filepath = resolve_config_path(filename)
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")
    
    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
