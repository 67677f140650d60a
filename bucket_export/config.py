from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .errors import ConfigError, log_and_reraise
from .utils import read_yaml

DEFAULT_CONFIG = "config/config.yaml"
DEFAULT_OUTPUT_ROOT = "exported_buckets"


@dataclass(frozen=True)
class Credentials:
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None


@dataclass(frozen=True)
class ClientSettings:
    retries_max_attempts: int = 8
    retries_mode: str = "standard"
    connect_timeout: int = 10
    read_timeout: int = 60


@dataclass(frozen=True)
class ExportSettings:
    output_root: str = DEFAULT_OUTPUT_ROOT
    max_workers: int = 8
    progress: bool = True


@dataclass(frozen=True)
class Config:
    credentials: Credentials
    client: ClientSettings
    export: ExportSettings


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section `{name}` must be a mapping")
    return value


def _read_cfg(path: str) -> Dict[str, Any]:
    """
    Load YAML config if present, otherwise return {}.
    Never crash on missing/empty config.
    """
    try:
        cfg = read_yaml(path)
    except FileNotFoundError:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return cfg


@log_and_reraise(ConfigError)
def load_config(config_path: Optional[str] = None) -> Config:
    cfg = _read_cfg(config_path or DEFAULT_CONFIG)

    cos = _section(_section(cfg, "credentials"), "cos")
    client = _section(cfg, "client")
    export = _section(cfg, "export")

    workers = int(export.get("max_workers", 8))
    if workers < 1:
        raise ConfigError("export.max_workers must be >= 1")

    return Config(
        credentials=Credentials(
            region=cos.get("region"),
            access_key_id=cos.get("access_key_id"),
            secret_access_key=cos.get("secret_access_key"),
            endpoint_url=cos.get("endpoint_url"),
        ),
        client=ClientSettings(
            retries_max_attempts=int(client.get("retries_max_attempts", 8)),
            retries_mode=client.get("retries_mode", "standard"),
            connect_timeout=int(client.get("connect_timeout", 10)),
            read_timeout=int(client.get("read_timeout", 60)),
        ),
        export=ExportSettings(
            output_root=export.get("output_root", DEFAULT_OUTPUT_ROOT),
            max_workers=workers,
            progress=bool(export.get("progress", True)),
        ),
    )
