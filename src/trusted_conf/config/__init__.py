"""Settings for the importer and its logging."""

from trusted_conf.config.interfaces import ConfigLoader
from trusted_conf.config.loader import YamlConfigLoader
from trusted_conf.config.models import AppConfig, ConfigLoadRequest, ImporterSettings, LoggingSettings

__all__ = ["AppConfig", "ConfigLoadRequest", "ConfigLoader", "ImporterSettings", "LoggingSettings", "YamlConfigLoader"]
