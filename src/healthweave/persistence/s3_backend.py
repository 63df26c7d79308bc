"""S3 persistence backend for container deployments."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

log = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3PersistenceBackend:
    """Stores each value as ``s3://<bucket>/<prefix><key>.json``."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "reports/",
        region: str = "us-east-1",
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._s3 = client if client is not None else boto3.client("s3", region_name=region)

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}.json"

    def save(self, key: str, data: str) -> None:
        self._s3.put_object(
            Bucket=self._bucket,
            Key=self._full_key(key),
            Body=data.encode("utf-8"),
            ContentType="application/json",
            ServerSideEncryption="AES256",
        )
        log.debug("Saved %s to s3://%s/%s", key, self._bucket, self._full_key(key))

    def load(self, key: str) -> str:
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=self._full_key(key))
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_CODES:
                raise KeyError(f"Not found in S3: {key}") from exc
            raise
        return response["Body"].read().decode("utf-8")

    def exists(self, key: str) -> bool:
        try:
            self._s3.head_object(Bucket=self._bucket, Key=self._full_key(key))
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return False
            raise
        return True

    def delete(self, key: str) -> None:
        self._s3.delete_object(Bucket=self._bucket, Key=self._full_key(key))

    def list_keys(self, prefix: str = "") -> list[str]:
        paginator = self._s3.get_paginator("list_objects_v2")
        keys: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=f"{self._prefix}{prefix}"):
            for obj in page.get("Contents", []):
                key = obj["Key"][len(self._prefix):]
                if key.endswith(".json"):
                    keys.append(key[:-5])
        return sorted(keys)
