"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

def _find_project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "core").is_dir():
            return parent
    return here.parent

PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "core" / "config"
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
MACHINE_INI = CONFIG_DIR / "config.ini"

ENV_PREFIX = "BERKAS_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Database": {
        "berkas": (PROJECT_ROOT / "databases" / "berkas.db").as_posix(),
        "logging": (PROJECT_ROOT / "databases" / "logs.db").as_posix(),
    },
    "General": {
        "app_name": "Berkas Lifecycle",
        "version": "1.0.0",
        "timezone": "Asia/Jakarta",
    },
    "Workflow": {
        "overdue_days": "7",
        "retry_max": "3",
        "retry_delay_ms": "100",
        "retry_backoff": "2.0",
        "optimistic_locking": "false",
        "list_limit": "100",
    },
    "Auth": {
        "session_ttl_hours": "24",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class DatabaseConfig:
    berkas: Path
    logging: Path


@dataclass
class GeneralConfig:
    app_name: str = ""
    version: str = ""
    timezone: str = "Asia/Jakarta"


@dataclass
class WorkflowConfig:
    overdue_days: int = 7
    retry_max: int = 3
    retry_delay_ms: int = 100
    retry_backoff: float = 2.0
    optimistic_locking: bool = False
    list_limit: int = 100

    def validate(self) -> None:
        if self.overdue_days < 1:
            raise ValueError("[Workflow] overdue_days must be at least 1")
        if self.retry_max < 0 or self.retry_delay_ms < 0:
            raise ValueError("[Workflow] retry_max and retry_delay_ms must not be negative")
        if self.retry_backoff < 1.0:
            raise ValueError("[Workflow] retry_backoff must be >= 1.0")
        if self.list_limit < 1:
            raise ValueError("[Workflow] list_limit must be at least 1")


@dataclass
class AuthConfig:
    session_ttl_hours: int = 24

    def validate(self) -> None:
        if self.session_ttl_hours < 1:
            raise ValueError("[Auth] session_ttl_hours must be at least 1")


@dataclass
class AppConfig:
    database: DatabaseConfig
    general: GeneralConfig
    workflow: WorkflowConfig
    auth: AuthConfig


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    # dataclass field types are strings under `from __future__ import annotations`
    name = typ if isinstance(typ, str) else getattr(typ, "__name__", str(typ))
    if name == "Path":
        return Path(str(value)).expanduser()
    if name == "bool":
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if name == "int":
        return int(value)
    if name == "float":
        return float(value)
    return str(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays() -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Berkas" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "berkas" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self) -> None:
        self._lock = RLock()
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if DEFAULTS_INI.exists():
                _apply(merged, _read_ini(DEFAULTS_INI), "defaults.ini", str(DEFAULTS_INI), sources)

            # Layer 2: environment variables
            _apply(merged, _env_overlays(), "env", "os.environ", sources)

            # Layer 3: machine config
            if MACHINE_INI.exists():
                _apply(merged, _read_ini(MACHINE_INI), "machine", str(MACHINE_INI), sources)

            # Layer 4: user overrides
            user_ini = _user_config_path()
            if user_ini.exists():
                _apply(merged, _read_ini(user_ini), "user", str(user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.database = _build_dataclass(DatabaseConfig, merged.get("Database", {}))
            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.workflow = _build_dataclass(WorkflowConfig, merged.get("Workflow", {}))
            self.auth = _build_dataclass(AuthConfig, merged.get("Auth", {}))
            self.workflow.validate()
            self.auth.validate()

    # ------------------------------------------------------------------ #
    def as_app_config(self) -> AppConfig:
        return AppConfig(
            database=self.database,
            general=self.general,
            workflow=self.workflow,
            auth=self.auth,
        )

    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast.__name__)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
