"""
Configuration loading utilities for markovtext.

Generation settings come from YAML files, then ``key=value`` overrides, then explicit
command-line flags. Every layer is a flat mapping over the fields of
:class:`markovtext.models.GenerationConfiguration`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from .models import GenerationConfiguration

_INTEGER = re.compile(r"^-?\d+$")


def configuration_keys() -> List[str]:
    """
    Return the keys accepted by a generation configuration.

    :return: Sorted configuration keys.
    :rtype: list[str]
    """
    return sorted(GenerationConfiguration.model_fields)


def parse_override_value(raw: str) -> object:
    """
    Parse a command-line override string into a configuration value.

    Integers become ``int``, ``null``/``none`` become ``None``; anything else stays a string
    for pydantic to validate.

    :param raw: Raw override string.
    :type raw: str
    :return: Parsed value.
    :rtype: object
    """
    stripped = str(raw).strip()
    if stripped.lower() in {"null", "none"}:
        return None
    if _INTEGER.match(stripped):
        return int(stripped)
    return stripped


def parse_overrides(pairs: Optional[Iterable[str]]) -> Dict[str, object]:
    """
    Parse repeated key=value pairs into configuration overrides.

    :param pairs: Repeated command-line pairs.
    :type pairs: Iterable[str] or None
    :return: Override mapping.
    :rtype: dict[str, object]
    :raises ValueError: If a pair is not key=value or names an unknown key.
    """
    known = configuration_keys()
    overrides: Dict[str, object] = {}
    for item in pairs or []:
        if "=" not in item:
            raise ValueError(f"Config values must be key=value (got {item!r})")
        key, raw = item.split("=", 1)
        key = key.strip()
        if key not in known:
            raise ValueError(
                f"Unknown configuration key {key!r}. Known keys: {', '.join(known)}"
            )
        overrides[key] = parse_override_value(raw)
    return overrides


def load_configuration_view(
    configuration_paths: Iterable[str],
    *,
    configuration_label: str = "Configuration",
) -> Dict[str, object]:
    """
    Load a composed configuration view from one or more YAML files.

    Later files replace the keys of earlier ones.

    :param configuration_paths: Iterable of configuration file paths in precedence order.
    :type configuration_paths: Iterable[str]
    :param configuration_label: Label used in error messages (for example: "Configuration file").
    :type configuration_label: str
    :return: Composed configuration view.
    :rtype: dict[str, object]
    :raises FileNotFoundError: If any configuration file is missing.
    :raises ValueError: If any configuration file is not valid YAML or not a mapping.
    """
    paths: List[Path] = [Path(str(path)) for path in configuration_paths]
    for candidate in paths:
        if not candidate.is_file():
            raise FileNotFoundError(f"{configuration_label} not found: {candidate}")

    view: Dict[str, object] = {}
    for candidate in paths:
        try:
            loaded = yaml.safe_load(candidate.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"{configuration_label} is not valid YAML: {candidate}") from exc
        if loaded is None:
            continue
        if not isinstance(loaded, dict):
            raise ValueError(f"{configuration_label} must be a mapping: {candidate}")
        view.update(loaded)
    return view


def build_configuration(
    configuration_paths: Optional[Iterable[str]] = None,
    overrides: Optional[Mapping[str, object]] = None,
) -> GenerationConfiguration:
    """
    Compose configuration files and overrides into a validated configuration.

    :param configuration_paths: Optional YAML files in precedence order.
    :type configuration_paths: Iterable[str] or None
    :param overrides: Values that replace file values.
    :type overrides: Mapping[str, object] or None
    :return: Validated configuration.
    :rtype: GenerationConfiguration
    :raises ValueError: If the composed configuration is invalid.
    """
    data: Dict[str, object] = {}
    if configuration_paths:
        data = load_configuration_view(
            configuration_paths, configuration_label="Configuration file"
        )
    data.update(overrides or {})
    try:
        return GenerationConfiguration.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid generation configuration: {exc}") from exc
