from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List
import boto3
from botocore.config import Config

from .config import Credentials, ClientSettings
from .utils import build_endpoint

log = logging.getLogger(__name__)


def get_s3_client(
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    retries_max_attempts: int = 8,
    retries_mode: str = "standard",
    connect_timeout: int = 10,
    read_timeout: int = 60,
):
    """Create a boto3 S3 client with sensible retries and timeouts."""
    cfg = Config(
        retries={"max_attempts": retries_max_attempts, "mode": retries_mode},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )
    session = boto3.Session(
        aws_access_key_id=aws_access_key_id,
        aws_secret_access_key=aws_secret_access_key,
        region_name=region_name,
    )
    return session.client("s3", endpoint_url=endpoint_url, config=cfg)


def client_from_credentials(credentials: Credentials, settings: Optional[ClientSettings] = None):
    """
    Build a client against the region endpoint, unless the config
    pins an explicit endpoint_url.
    """
    settings = settings or ClientSettings()
    endpoint = credentials.endpoint_url or build_endpoint(credentials.region, public=True)
    log.debug("Using endpoint %s", endpoint)
    return get_s3_client(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        region_name=credentials.region,
        endpoint_url=endpoint,
        retries_max_attempts=settings.retries_max_attempts,
        retries_mode=settings.retries_mode,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )


def list_buckets(credentials: Credentials, settings: Optional[ClientSettings] = None) -> List[str]:
    """Return bucket names owned by the account, in provider order. Errors propagate."""
    s3 = client_from_credentials(credentials, settings)
    resp = s3.list_buckets()
    return [b["Name"] for b in resp.get("Buckets", []) or []]


class RegionStatus(Enum):
    LOCATED = "located"
    EMPTY = "empty"              # call succeeded, no location constraint
    UNREACHABLE = "unreachable"  # call failed for any reason


@dataclass(frozen=True)
class RegionProbe:
    status: RegionStatus
    location: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is RegionStatus.LOCATED


def probe_bucket_region(s3_client, bucket: str) -> RegionProbe:
    """Ask for the bucket's location constraint; never raises."""
    try:
        resp = s3_client.get_bucket_location(Bucket=bucket)
    except Exception as e:
        log.debug("get_bucket_location(%s) failed: %s", bucket, e)
        return RegionProbe(RegionStatus.UNREACHABLE, error=str(e))
    location = resp.get("LocationConstraint")
    if location:
        return RegionProbe(RegionStatus.LOCATED, location=location)
    return RegionProbe(RegionStatus.EMPTY, location=location)


def check_region(
    credentials: Credentials,
    bucket: str,
    settings: Optional[ClientSettings] = None,
) -> bool:
    """
    True only if the bucket reports a location through the configured
    region endpoint. An empty location constraint counts as a failure.
    """
    try:
        s3 = client_from_credentials(credentials, settings)
    except Exception as e:
        log.debug("Could not build client for region check: %s", e)
        return False
    probe = probe_bucket_region(s3, bucket)
    if probe.status is RegionStatus.EMPTY:
        log.warning(
            "Bucket %s returned an empty location constraint; treating it as outside region %s",
            bucket,
            credentials.region,
        )
    elif probe.status is RegionStatus.UNREACHABLE:
        log.warning("Could not determine the region of bucket %s: %s", bucket, probe.error)
    return probe.ok
