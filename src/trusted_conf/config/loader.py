from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

import yaml
from dotenv import load_dotenv

from trusted_conf.config.models import AppConfig, ConfigLoadRequest

logger = logging.getLogger(__name__)


def _deep_merge_dicts(base: MutableMapping[str, Any], override: Mapping[str, Any]) -> None:
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(base.get(k), Mapping):
            _deep_merge_dicts(base[k], v)  # type: ignore[index]
            continue
        base[k] = v


def _read_yaml_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in settings file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")
    return data


def _load_dotenv_if_present(dotenv_path: Path) -> None:
    if not dotenv_path.exists():
        return
    # Values already present in the real environment win.
    load_dotenv(dotenv_path=dotenv_path, override=False)
    logger.debug("config.dotenv_loaded path=%s", dotenv_path)


def _env_var_name_to_segments(env_var_name: str, prefix: str) -> Sequence[str]:
    parts = [p for p in env_var_name[len(prefix) :].split("__") if p]
    if not parts:
        raise ValueError(f"Invalid environment variable override name: {env_var_name}")
    return [p.lower() for p in parts]


def _collect_env_overrides(environ: Mapping[str, str], env_prefix: str) -> dict[str, Any]:
    """
    Turn `PREFIX__SECTION__KEY=value` variables into a nested override mapping.

    Values stay raw strings; the settings models coerce them, so `false` or `0` work for
    booleans and digits for integers. Overrides may also fill sections that default to
    None, such as `logging.file`.
    """
    overrides: dict[str, Any] = {}
    for name in sorted(environ):
        if not name.startswith(env_prefix):
            continue

        segments = _env_var_name_to_segments(name, env_prefix)
        dotted = ".".join(segments)
        cur = overrides
        for segment in segments[:-1]:
            nested = cur.setdefault(segment, {})
            if not isinstance(nested, dict):
                raise ValueError(f"Conflicting environment overrides for settings key path: {dotted}")
            cur = nested
        if isinstance(cur.get(segments[-1]), dict):
            raise ValueError(f"Conflicting environment overrides for settings key path: {dotted}")
        cur[segments[-1]] = environ[name]
        logger.debug("config.env_override key=%s", dotted)
    return overrides


class YamlConfigLoader:
    def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        settings: dict[str, Any] = copy.deepcopy(AppConfig().model_dump(mode="python"))

        if request.yaml_path is not None:
            _deep_merge_dicts(settings, _read_yaml_settings(Path(request.yaml_path)))

        if request.dotenv_path is not None:
            _load_dotenv_if_present(Path(request.dotenv_path))

        _deep_merge_dicts(settings, _collect_env_overrides(os.environ, request.env_prefix))
        # Unknown keys and uncoercible values surface here as pydantic ValidationError.
        return AppConfig.model_validate(settings)
