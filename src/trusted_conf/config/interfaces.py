from __future__ import annotations

from typing import Protocol

from trusted_conf.config.models import AppConfig, ConfigLoadRequest


class ConfigLoader(Protocol):
    """
    Loads the effective settings for the importer and its logging.

    Precedence, lowest first: model defaults, YAML file, environment variables
    (including those supplied by a .env file).
    """

    def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        ...
