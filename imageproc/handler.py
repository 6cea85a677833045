"""
Function handler: image transform on object create

Triggered by an S3 ObjectCreated notification (directly, or wrapped in SQS
records).

Flow:
  1. Checks that the source and destination buckets exist.
  2. Drops events that are not object creates, come from another bucket, or
     match IGNORE_NAME_PATTERN.
  3. Downloads the object.
  4. Copies it unchanged when the key matches COPY_ONLY_NAME_PATTERN,
     otherwise runs the configured OPERATION on it.
  5. Uploads the result under the destination key with its Content-Type.

Environment variables: see ``imageproc.config.Settings``.
"""
from __future__ import annotations

import functools
import json
import logging
import urllib.parse
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from imageproc.config import Settings
from imageproc.dispatcher import dispatch, parse_operation
from imageproc.exceptions import BucketNotFound, ImageProcessingError
from imageproc.inspector import inspect
from imageproc.storage import ObjectStore, S3ObjectStore

logger = logging.getLogger(__name__)

OBJECT_CREATED_PREFIX = "ObjectCreated:"


@dataclass(frozen=True, slots=True)
class ObjectCreatedEvent:
    event_type: str
    bucket: str
    key: str


def parse_event(event: dict) -> Iterator[ObjectCreatedEvent]:
    """Flatten an S3 notification (optionally inside SQS records) into events."""
    for record in event.get("Records", []):
        # SQS wrapper: unwrap the S3 event from the SQS message body
        if record.get("eventSource") == "aws:sqs":
            body = json.loads(record.get("body") or "{}")
            s3_records = body.get("Records", [])
        else:
            s3_records = [record]

        for s3_record in s3_records:
            s3_info = s3_record.get("s3", {})
            yield ObjectCreatedEvent(
                event_type=s3_record.get("eventName", ""),
                bucket=s3_info.get("bucket", {}).get("name", ""),
                key=urllib.parse.unquote_plus(s3_info.get("object", {}).get("key", "")),
            )


class ObjectCreatedHandler:
    """Callable ``(event, context) -> dict`` bound to one configured operation."""

    def __init__(
        self,
        settings: Settings,
        store: ObjectStore,
        *,
        dest_name_transform: Callable[[str], str] | None = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._dest_name_transform = dest_name_transform
        self._operation = parse_operation(settings.operation)
        self._ignore = settings.ignore_name_regex
        self._copy_only = settings.copy_only_name_regex

    def __call__(self, event: dict, context: object = None) -> dict:
        results = [self._process(obj) for obj in parse_event(event)]
        return {"statusCode": 200, "results": results}

    def dest_key(self, key: str) -> str:
        if self._dest_name_transform is not None:
            return self._dest_name_transform(key)
        if self._settings.dest_name_prefix:
            return self._settings.dest_name_prefix + key
        return key

    def _is_target(self, obj: ObjectCreatedEvent) -> bool:
        if not obj.event_type.startswith(OBJECT_CREATED_PREFIX):
            return False
        if self._settings.source_bucket and obj.bucket != self._settings.source_bucket:
            return False
        if self._ignore is not None and self._ignore.search(obj.key):
            return False
        return True

    def _process(self, obj: ObjectCreatedEvent) -> dict:
        source_bucket = self._settings.source_bucket or obj.bucket
        dest_bucket = self._settings.dest_bucket or obj.bucket

        if source_bucket == dest_bucket and self._ignore is None:
            logger.error(
                "IGNORE_NAME_PATTERN is not set even though source and destination bucket "
                "are both %s; refusing to process %s",
                source_bucket, obj.key,
            )
            return {"status": "skipped", "key": obj.key, "reason": "ignore pattern required"}

        for bucket in {source_bucket, dest_bucket}:
            if not self._store.exists(bucket):
                raise BucketNotFound(bucket)

        if not self._is_target(obj):
            logger.info(
                "Event is not target, bucket: %s, eventType: %s, key: %s",
                obj.bucket, obj.event_type, obj.key,
            )
            return {"status": "skipped", "key": obj.key, "reason": "not a target"}

        source = self._store.read(source_bucket, obj.key)
        if not source.body:
            return {"status": "skipped", "key": obj.key, "reason": "empty object"}

        dest_key = self.dest_key(obj.key)
        if self._copy_only is not None and self._copy_only.search(obj.key):
            self._store.write(dest_bucket, dest_key, source.body, source.content_type)
            logger.info("Copied s3://%s/%s to s3://%s/%s", source_bucket, obj.key, dest_bucket, dest_key)
            return {"status": "copied", "key": obj.key, "dest_key": dest_key}

        try:
            output = dispatch(source.body, self._operation)
            mime_type = inspect(output).mime_type
        except ImageProcessingError as exc:
            logger.exception("Error processing s3://%s/%s: %s", source_bucket, obj.key, exc)
            return {"status": "error", "key": obj.key, "message": str(exc)}

        self._store.write(dest_bucket, dest_key, output, mime_type)
        logger.info(
            "Processed s3://%s/%s with %s -> s3://%s/%s (%s)",
            source_bucket, obj.key, self._operation.name, dest_bucket, dest_key, mime_type,
        )
        return {
            "status": "completed",
            "key": obj.key,
            "dest_key": dest_key,
            "content_type": mime_type,
        }


def handle_storage_object_created(
    settings: Settings,
    store: ObjectStore | None = None,
    *,
    dest_name_transform: Callable[[str], str] | None = None,
) -> ObjectCreatedHandler:
    """Build a handler for ``settings``; defaults to S3 storage."""
    if store is None:
        store = S3ObjectStore.from_settings(settings)
    return ObjectCreatedHandler(settings, store, dest_name_transform=dest_name_transform)


@functools.lru_cache(maxsize=1)
def _default_handler() -> ObjectCreatedHandler:
    settings = Settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s:%(name)s: %(message)s")
    return handle_storage_object_created(settings)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point."""
    return _default_handler()(event, context)
