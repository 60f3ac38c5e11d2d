"""Read and write snapshot bytes at a location.

Supported locations:
    - Local file paths, e.g. `urls.json` or `/var/lib/shortie/urls.json`;
    - S3 object URIs, e.g. `s3://my-bucket/backups/urls.json` (via boto3).

Local writes go to a temporary sibling file which then replaces the target,
so a failed export never leaves a truncated snapshot behind.

Functions:
    read_snapshot(location, s3_client=None) -> bytes
    write_snapshot(location, data, s3_client=None) -> None
"""

import os
import logging
import tempfile
from pathlib import Path
from urllib.parse import urlsplit

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from shortie.exceptions import SnapshotError


logger = logging.getLogger(__name__)

S3_SCHEME = 's3'


def _s3_location(location: str) -> tuple[str, str] | None:
    parts = urlsplit(location)
    if parts.scheme != S3_SCHEME:
        return None
    bucket, key = parts.netloc, parts.path.lstrip('/')
    if not bucket or not key:
        raise SnapshotError(f'Malformed S3 location {location!r} (expected s3://<bucket>/<key>).')
    return bucket, key


def read_snapshot(location: str, s3_client: BaseClient | None = None) -> bytes:
    """Read the raw snapshot stored at `location`

    Raises:
        SnapshotError: If the file or object cannot be read.
    """
    s3 = _s3_location(location)
    if s3 is not None:
        bucket, key = s3
        client = s3_client or boto3.client('s3')
        try:
            return client.get_object(Bucket=bucket, Key=key)['Body'].read()
        except (BotoCoreError, ClientError) as e:
            raise SnapshotError(f"Can't read snapshot from {location}.") from e

    try:
        return Path(location).read_bytes()
    except OSError as e:
        raise SnapshotError(f"Can't read snapshot from {location}.") from e


def write_snapshot(location: str, data: bytes, s3_client: BaseClient | None = None) -> None:
    """Write raw snapshot bytes to `location`

    Raises:
        SnapshotError: If the file or object cannot be written.
    """
    s3 = _s3_location(location)
    if s3 is not None:
        bucket, key = s3
        client = s3_client or boto3.client('s3')
        try:
            client.put_object(Bucket=bucket, Key=key, Body=data, ContentType='application/json')
        except (BotoCoreError, ClientError) as e:
            raise SnapshotError(f"Can't write snapshot to {location}.") from e
        return

    path = Path(location)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile('wb', dir=path.parent or '.', prefix=f'.{path.name}.', delete=False) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SnapshotError(f"Can't write snapshot to {location}.") from e
