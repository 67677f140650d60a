import io
import logging
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError


def client_error(code: str, message: str = "boom", op: str = "Op") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, op)


def make_s3_client(
    objects: Dict[str, bytes],
    buckets: Optional[List[str]] = None,
    location: Optional[str] = "us-south",
    truncated: bool = False,
    failing_keys: Optional[set] = None,
) -> MagicMock:
    """MagicMock standing in for a boto3 S3 client backed by an in-memory bucket."""
    failing_keys = failing_keys or set()
    s3 = MagicMock()
    s3.list_buckets.return_value = {"Buckets": [{"Name": b} for b in (buckets or [])]}
    s3.get_bucket_location.return_value = {"LocationConstraint": location}
    s3.list_objects_v2.return_value = {
        "Contents": [{"Key": k} for k in objects],
        "IsTruncated": truncated,
    }

    def _get_object(Bucket, Key):
        if Key in failing_keys:
            raise client_error("InternalError", f"cannot read {Key}", "GetObject")
        return {"Body": io.BytesIO(objects[Key])}

    s3.get_object.side_effect = _get_object
    return s3


@pytest.fixture
def s3_factory():
    return make_s3_client


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "credentials:\n"
        "  cos:\n"
        "    region: us-south\n"
        "    access_key_id: AKID\n"
        "    secret_access_key: SECRET\n"
        "export:\n"
        "  max_workers: 4\n"
        "  progress: false\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if type(h) is logging.StreamHandler:
            root.removeHandler(h)
    root.setLevel(level)
