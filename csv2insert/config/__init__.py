from .loader import ConfigError, ConvertConfig, load_config, resolve_config_path

__all__ = [
    "ConfigError",
    "ConvertConfig",
    "load_config",
    "resolve_config_path",
]
