"""
Object storage: the read/write/exists capability the event handler needs.

``S3ObjectStore`` wraps a boto3 S3 client.  Tests inject an in-memory store
implementing the same protocol.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import boto3
from botocore.exceptions import ClientError

from imageproc.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class StoredObject:
    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


class ObjectStore(Protocol):
    def read(self, bucket: str, key: str) -> StoredObject: ...

    def write(self, bucket: str, key: str, body: bytes, content_type: str) -> None: ...

    def exists(self, bucket: str) -> bool: ...


class S3ObjectStore:
    def __init__(self, client) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> S3ObjectStore:
        kwargs = {"region_name": settings.aws_region}
        if settings.aws_access_key_id:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        if settings.s3_endpoint_url:
            kwargs["endpoint_url"] = settings.s3_endpoint_url
        return cls(boto3.client("s3", **kwargs))

    def read(self, bucket: str, key: str) -> StoredObject:
        response = self._client.get_object(Bucket=bucket, Key=key)
        body = response["Body"].read()
        return StoredObject(body=body, content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE)

    def write(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self._client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
        logger.debug("Wrote s3://%s/%s (%d bytes, %s)", bucket, key, len(body), content_type)

    def exists(self, bucket: str) -> bool:
        try:
            self._client.head_bucket(Bucket=bucket)
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code", "")
            if error_code in ("404", "NoSuchBucket", "NotFound"):
                return False
            raise
        return True
