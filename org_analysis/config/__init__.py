from .loaders import ConfigLoadError, load_settings, load_yaml_config
from .models import AnalysisSettings

__all__ = [
    "AnalysisSettings",
    "ConfigLoadError",
    "load_settings",
    "load_yaml_config",
]
