"""Configuration management for irscan."""

import json
from functools import lru_cache
from typing import Dict, Any, FrozenSet, Optional, Tuple
from pathlib import Path


class ConfigLoader:
    """Loads configuration from JSON files."""
    
    def __init__(self, config_dir: Optional[str] = None):
        """Initialize config loader.
        
        Args:
            config_dir: Directory containing config files. If None, uses default config directory.
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent
        else:
            self.config_dir = Path(config_dir)
    
    def load_config(self, config_name: str) -> Dict[str, Any]:
        """Load configuration from a JSON file.
        
        Args:
            config_name: Name of the config file (without .json extension)
            
        Returns:
            Dictionary containing the configuration data
            
        Raises:
            FileNotFoundError: If the config file doesn't exist
            json.JSONDecodeError: If the config file contains invalid JSON
        """
        config_path = self.config_dir / f"{config_name}.json"
        
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        with open(config_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    
    def get_builtins_config(self) -> Dict[str, Any]:
        """Load the implicit builtin type configuration."""
        return self.load_config("builtins")

    def get_classifier_config(self) -> Dict[str, Any]:
        """Load call classifier configuration."""
        return self.load_config("classifier")


# Global config loader instance
_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get the global configuration loader instance."""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


@lru_cache(maxsize=None)
def load_builtin_type_names() -> FrozenSet[str]:
    """Names of the compiler-injected types hidden by the filtered signature views."""
    return frozenset(get_config_loader().get_builtins_config()["implicit_types"])


@lru_cache(maxsize=None)
def load_storage_suffixes() -> Tuple[str, str]:
    """Return the ``(read, write)`` name suffixes of storage accessors."""
    config = get_config_loader().get_classifier_config()
    return config["storage_read_suffix"], config["storage_write_suffix"]
