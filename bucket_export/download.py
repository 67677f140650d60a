from __future__ import annotations
import logging
from typing import Dict, List, Tuple
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed

from tqdm import tqdm

from .errors import BucketExportError
from .utils import export_path, is_directory_key, write_bytes

log = logging.getLogger(__name__)


def list_first_page_keys(s3_client, bucket: str) -> List[str]:
    """
    Keys from a single list_objects_v2 page, pseudo-directories dropped.
    Objects past the first page are not listed.
    """
    resp = s3_client.list_objects_v2(Bucket=bucket)
    keys = [obj["Key"] for obj in resp.get("Contents", []) or [] if obj.get("Key")]
    if resp.get("IsTruncated"):
        log.warning(
            "Bucket %s has more than %d objects; only the first page will be exported",
            bucket,
            len(keys),
        )
    return [k for k in keys if not is_directory_key(k)]


def fetch_object(s3_client, bucket: str, key: str, dst_path: str | Path) -> Path:
    resp = s3_client.get_object(Bucket=bucket, Key=key)
    body = resp["Body"]
    data = body.read() if hasattr(body, "read") else body
    return write_bytes(dst_path, data)


def download_bucket(
    s3_client,
    bucket: str,
    root: str | Path,
    max_workers: int = 8,
    progress: bool = False,
) -> List[Path]:
    """
    Export every first-page object of `bucket` to <root>/<bucket>/<key>.

    Fetches run on a pool of `max_workers` threads. The first failure
    cancels whatever has not started yet and raises BucketExportError;
    fetches already running are left to finish on their own.
    """
    keys = list_first_page_keys(s3_client, bucket)
    pairs: List[Tuple[str, Path]] = [(k, export_path(root, bucket, k)) for k in keys]
    seen: Dict[Path, str] = {}
    for key, dst in pairs:
        if dst in seen:
            log.warning(
                "Keys %r and %r both map to %s; the last one fetched wins",
                seen[dst],
                key,
                dst,
            )
        else:
            seen[dst] = key
    log.info("Exporting %d objects from %s to %s", len(pairs), bucket, Path(root) / bucket)

    written: List[Tuple[str, Path]] = []
    bar = tqdm(total=len(pairs), desc="Export", unit="obj") if progress and pairs else None

    ex = ThreadPoolExecutor(max_workers=max_workers)
    try:
        futs = {ex.submit(fetch_object, s3_client, bucket, k, dst): k for (k, dst) in pairs}
        for f in as_completed(futs):
            key = futs[f]
            try:
                written.append((key, f.result()))
            except Exception as e:
                log.error("Fetching %s/%s failed: %s", bucket, key, e)
                raise BucketExportError(bucket, key, str(e)) from e
            finally:
                if bar:
                    bar.update(1)
    finally:
        ex.shutdown(wait=False, cancel_futures=True)
        if bar:
            bar.close()

    written.sort(key=lambda x: x[0])
    return [p for (_, p) in written]
