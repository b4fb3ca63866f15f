"""
Configuration Loader for Companion Service

This module loads configuration from JSON file and provides fallback defaults.
"""

import json
import os
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Default configuration (used as fallback)
DEFAULT_CONFIG = {
    "ai_gateway": {
        "base_url": "https://ai.gateway.lovable.dev",
        "model": "google/gemini-2.5-flash",
        "timeout_seconds": 30.0
    },
    "cors": {
        "allow_origins": ["*"],
        "allow_headers": ["authorization", "x-client-info", "apikey", "content-type"]
    },
    "session": {
        "analyze_url": "http://localhost:8000/emotion/analyze",
        "request_timeout_seconds": 60.0,
        "vision_interval_seconds": 3.0,
        "speech_locale": "en-US",
        "history_max_entries": None
    }
}

# Cache for loaded config
_config_cache: Dict[str, Any] = None


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Missing sections or keys in the file fall back to DEFAULT_CONFIG.

    Args:
        config_path: Path to config file. If None, uses default path relative to this module.

    Returns:
        Configuration dictionary. Returns default config if file not found or invalid.
    """
    global _config_cache

    # Return cached config if available
    if _config_cache is not None:
        return _config_cache

    # Determine config file path
    if config_path is None:
        # Default to config.json in same directory as this module
        module_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(module_dir, "config.json")

    # Try to load config file
    try:
        if os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
            _config_cache = _merge_with_defaults(config)
            return _config_cache
        else:
            logger.warning(f"Config file not found at {config_path}, using default configuration")
            _config_cache = DEFAULT_CONFIG
            return DEFAULT_CONFIG
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG
    except OSError as e:
        logger.error(f"Error loading config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG


def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    merged = {}
    for section, defaults in DEFAULT_CONFIG.items():
        overrides = config.get(section) or {}
        merged[section] = {**defaults, **overrides}
    return merged


def clear_config_cache() -> None:
    """Forget the cached configuration so the next load_config() re-reads the file."""
    global _config_cache
    _config_cache = None
