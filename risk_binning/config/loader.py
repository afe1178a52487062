"""
Config Loader

Builds a PipelineConfig from schema defaults, a YAML file, flat CLI
overrides and nested programmatic overrides, in that order of precedence.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging

import yaml

from risk_binning.config.schema import PipelineConfig
from risk_binning.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _read_yaml(yaml_file: Path) -> Dict[str, Any]:
    if not yaml_file.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_file}")

    with open(yaml_file, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping of sections, got {type(raw).__name__}",
            details={"path": str(yaml_file)},
        )
    logger.info("CONFIG | Loaded %s", yaml_file)
    return raw


def _unknown_keys(raw: Dict[str, Any]) -> List[str]:
    """Dotted names of keys that no config section defines."""
    sections = PipelineConfig.model_fields
    unknown = []
    for section, values in raw.items():
        if section not in sections:
            unknown.append(section)
            continue
        if isinstance(values, dict):
            known = sections[section].annotation.model_fields
            unknown.extend(f"{section}.{k}" for k in values if k not in known)
    return unknown


def _set_dotted(raw: Dict[str, Any], dotted_key: str, value: Any) -> None:
    section, _, key = dotted_key.partition(".")
    if not key:
        raise ConfigurationError(
            f"Override '{dotted_key}' must have the form section.key",
            details={"override": dotted_key},
        )
    target = raw.setdefault(section, {})
    if not isinstance(target, dict):
        raise ConfigurationError(f"Config section '{section}' is not a mapping")
    target[key] = value


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def _resolve_input_path(raw: Dict[str, Any], yaml_dir: Path) -> None:
    """
    Make a relative data.input_path relative to the YAML file.

    Left as given when no file exists there, so paths relative to the
    working directory keep working.
    """
    data_cfg = raw.get("data") or {}
    input_path = data_cfg.get("input_path")
    if not input_path or Path(input_path).is_absolute():
        return
    candidate = (yaml_dir / input_path).resolve()
    if candidate.exists():
        data_cfg["input_path"] = str(candidate)


def load_config(
    yaml_path: Optional[str] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> PipelineConfig:
    """
    Load the analysis configuration.

    Args:
        yaml_path: YAML config file; schema defaults only when None.
        cli_overrides: Flat ``section.key`` overrides from the command line,
            e.g. ``{"binning.low_threshold": 0.25}``. None values are skipped.
        overrides: Nested dict merged last.

    Returns:
        Frozen PipelineConfig.

    Raises:
        FileNotFoundError: ``yaml_path`` does not exist.
        ConfigurationError: Unknown sections or keys, or a malformed file.
        pydantic.ValidationError: Values fail the schema validators.
    """
    raw: Dict[str, Any] = {}
    if yaml_path is not None:
        yaml_file = Path(yaml_path)
        raw = _read_yaml(yaml_file)
        _resolve_input_path(raw, yaml_file.parent)

    for key, value in (cli_overrides or {}).items():
        if value is not None:
            _set_dotted(raw, key, value)

    if overrides:
        _merge(raw, overrides)

    unknown = _unknown_keys(raw)
    if unknown:
        raise ConfigurationError(
            f"Unknown config key(s): {unknown}",
            details={"sections": list(PipelineConfig.model_fields)},
        )

    config = PipelineConfig(**raw)
    logger.debug(
        "CONFIG | cut points %g / %g, reference=%s",
        config.binning.low_threshold,
        config.binning.high_threshold,
        config.model.reference_category,
    )
    return config


def save_config(config: PipelineConfig, path: str) -> None:
    """Write ``config`` as YAML (.yaml/.yml) or JSON (any other suffix)."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = config.model_dump()

    with open(out_path, "w", encoding="utf-8") as f:
        if out_path.suffix in YAML_SUFFIXES:
            yaml.dump(payload, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(payload, f, indent=2, default=str)

    logger.info("CONFIG | Saved to %s", out_path)
