from __future__ import annotations
from typing import Dict, Any
from pathlib import Path
import yaml

from .errors import EndpointError

_PUBLIC_ENDPOINT = "https://s3.{region}.cloud-object-storage.appdomain.cloud"
_PRIVATE_ENDPOINT = "https://s3.private.{region}.cloud-object-storage.appdomain.cloud"


def ensure_dir(path: Path | str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_endpoint(region: str | None, public: bool = True) -> str:
    """Return the Cloud Object Storage endpoint URL for a region."""
    region = (region or "").strip()
    if not region:
        raise EndpointError("No region configured; cannot build an endpoint")
    template = _PUBLIC_ENDPOINT if public else _PRIVATE_ENDPOINT
    return template.format(region=region)


def is_directory_key(key: str) -> bool:
    return key.endswith("/")


def export_path(root: Path | str, bucket: str, key: str) -> Path:
    """
    Local path for an exported object: <root>/<bucket>/<key>.
    Keys that would land outside <root>/<bucket> are rejected.
    """
    base = Path(root) / bucket
    dst = base / key.lstrip("/")
    if not dst.resolve().is_relative_to(base.resolve()):
        raise ValueError(f"Object key escapes export directory: {key}")
    return dst


def write_bytes(path: Path | str, data: bytes) -> Path:
    dst = Path(path)
    ensure_dir(dst.parent)
    dst.write_bytes(data)
    return dst
