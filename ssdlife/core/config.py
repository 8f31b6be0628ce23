"""Configuration loading with layered overrides."""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from ssdlife.models import Severity


class ConfigError(Exception):
    """Invalid configuration value."""

    pass


PROJECT_CONFIG = Path(".ssdlife.yaml")


def user_config_path() -> Path:
    return Path.home() / ".config" / "ssdlife" / "config.yaml"


@dataclass(frozen=True)
class Config:
    """Thresholds and tool settings threaded through one run."""

    warn_months: int = 6
    crit_months: int = 3
    warn_percent: float | None = None
    crit_percent: float | None = None
    no_ssd_severity: Severity = Severity.OK
    unsupported_severity: Severity = Severity.UNKNOWN
    command_timeout: int = 30
    use_sudo: bool = False
    logical_volume_models: tuple[str, ...] = ("LOGICAL VOLUME",)
    log_dir: Path | None = None

    def with_overrides(self, **overrides: Any) -> "Config":
        """Return a validated copy with the non-None overrides applied."""
        data = {k: v for k, v in overrides.items() if v is not None}
        return from_mapping(data, base=self)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML config file if it exists."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def from_mapping(data: dict[str, Any], base: Config | None = None) -> Config:
    """
    Build a Config from a plain mapping layered over ``base``.

    Unknown keys are ignored.

    Raises:
        ConfigError: If a value has the wrong type or thresholds conflict
    """
    base = base or Config()
    known = {f.name for f in fields(Config)}
    values: dict[str, Any] = {}

    for key, raw in data.items():
        key = str(key).replace("-", "_")
        if key not in known:
            continue
        values[key] = _coerce(key, raw)

    config = replace(base, **values)
    validate_config(config)
    return config


def _coerce(key: str, raw: Any) -> Any:
    try:
        if key in ("warn_months", "crit_months", "command_timeout"):
            return int(raw)
        if key in ("warn_percent", "crit_percent"):
            return None if raw is None else float(raw)
        if key in ("no_ssd_severity", "unsupported_severity"):
            return Severity.parse(raw)
        if key == "use_sudo":
            return _coerce_bool(raw)
        if key == "logical_volume_models":
            if isinstance(raw, str):
                return (raw,)
            return tuple(str(m) for m in raw)
        if key == "log_dir":
            return None if raw is None else Path(raw).expanduser()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {key}: {raw!r} ({e})") from e
    return raw


def _coerce_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError("expected a boolean")


def validate_config(config: Config) -> None:
    """Raise ConfigError if thresholds are inconsistent."""
    if config.crit_months < 0 or config.warn_months < 0:
        raise ConfigError("Month thresholds must be non-negative")
    if config.warn_months < config.crit_months:
        raise ConfigError(
            f"Warning threshold ({config.warn_months} months) must be >= "
            f"critical threshold ({config.crit_months} months)"
        )
    for name in ("warn_percent", "crit_percent"):
        value = getattr(config, name)
        if value is not None and not 0 <= value <= 100:
            raise ConfigError(f"{name} must be between 0 and 100, got {value}")
    if (
        config.warn_percent is not None
        and config.crit_percent is not None
        and config.warn_percent < config.crit_percent
    ):
        raise ConfigError(
            f"Warning threshold ({config.warn_percent}%) must be >= "
            f"critical threshold ({config.crit_percent}%)"
        )
    if config.command_timeout <= 0:
        raise ConfigError("command_timeout must be positive")


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """
    Load configuration with user -> project -> overrides precedence.

    Args:
        path: Explicit config file, used instead of the project file
        overrides: Values from the command line; None entries are skipped

    Returns:
        Validated Config
    """
    data: dict[str, Any] = {}
    data.update(load_config_file(user_config_path()))
    data.update(load_config_file(path if path is not None else PROJECT_CONFIG))

    config = from_mapping(data)
    if overrides:
        config = config.with_overrides(**overrides)
    return config
