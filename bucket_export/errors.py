from __future__ import annotations
import logging
import functools
from enum import Enum
from typing import Type, Callable, Any, Dict

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
)

class ExportToolError(Exception): pass
class ConfigError(ExportToolError): pass
class EndpointError(ConfigError): pass

class BucketExportError(ExportToolError):
    """A single object fetch failed, so the whole bucket export was aborted."""

    def __init__(self, bucket: str, key: str, reason: str):
        self.bucket = bucket
        self.key = key
        super().__init__(f"Failed to export s3://{bucket}/{key}: {reason}")


class ErrorKind(Enum):
    INVALID_ACCESS_KEY = "invalid_access_key"
    MISSING_CREDENTIALS = "missing_credentials"
    BAD_SIGNATURE = "bad_signature"
    UNKNOWN_ENDPOINT = "unknown_endpoint"
    OTHER = "other"


# ClientError codes with a dedicated message
_CLIENT_ERROR_KINDS: Dict[str, ErrorKind] = {
    "InvalidAccessKeyId": ErrorKind.INVALID_ACCESS_KEY,
    "SignatureDoesNotMatch": ErrorKind.BAD_SIGNATURE,
}


MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.INVALID_ACCESS_KEY: "The provided Cloud Object Storage `access_key_id` is invalid.",
    ErrorKind.MISSING_CREDENTIALS: "No Cloud Object Storage credentials were provided.",
    ErrorKind.BAD_SIGNATURE: "The provided Cloud Object Storage `secret_access_key` is invalid.",
    ErrorKind.UNKNOWN_ENDPOINT: "The provided Cloud Object Storage `region` is invalid.",
}


def error_code(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code", "")) or type(exc).__name__
    return type(exc).__name__


def error_message(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Message", "")) or str(exc)
    return str(exc)


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a provider/client exception onto an ErrorKind."""
    if isinstance(exc, (NoCredentialsError, PartialCredentialsError)):
        return ErrorKind.MISSING_CREDENTIALS
    if isinstance(exc, (EndpointConnectionError, EndpointError)):
        return ErrorKind.UNKNOWN_ENDPOINT
    if isinstance(exc, ClientError):
        return _CLIENT_ERROR_KINDS.get(error_code(exc), ErrorKind.OTHER)
    return ErrorKind.OTHER


def describe_error(exc: BaseException) -> str:
    """User-facing text for a failed authentication/listing call."""
    kind = classify_error(exc)
    if kind in MESSAGES:
        return MESSAGES[kind]
    return f"{error_code(exc)} - {error_message(exc)}"


def setup_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):  # avoid duplicate handlers
        root.removeHandler(h)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    root.addHandler(stream)

def log_and_reraise(exception_cls: Type[Exception] = ConfigError):
    def deco(func: Callable[..., Any]):
        @functools.wraps(func)
        def wrapper(*a, **kw):
            try:
                return func(*a, **kw)
            except exception_cls:
                raise
            except Exception as e:
                logging.getLogger(func.__module__).error("%s failed: %s", func.__name__, e)
                raise exception_cls(f"{func.__name__} failed: {e}") from e
        return wrapper
    return deco
