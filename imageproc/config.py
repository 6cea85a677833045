import re
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Routing ──────────────────────────────────────────────────────────────
    source_bucket: str = ""  # empty: any bucket, read from the event's bucket
    dest_bucket: str = ""    # empty: write back into the source bucket
    dest_name_prefix: str = ""
    ignore_name_pattern: str = ""
    copy_only_name_pattern: str = ""

    # ── Transform ────────────────────────────────────────────────────────────
    # JSON in the environment, e.g.
    # OPERATION='{"name": "resizeAspectFit", "params": {"maxWidth": 800, "maxHeight": 600, "noScaleUp": true}}'
    operation: dict[str, Any] = {"name": "convertFormat", "params": {"format": "jpg"}}

    # ── AWS ───────────────────────────────────────────────────────────────────
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-1"
    s3_endpoint_url: str = ""  # S3-compatible stores (MinIO, LocalStack)

    log_level: str = "INFO"

    @property
    def ignore_name_regex(self) -> re.Pattern[str] | None:
        return re.compile(self.ignore_name_pattern) if self.ignore_name_pattern else None

    @property
    def copy_only_name_regex(self) -> re.Pattern[str] | None:
        return re.compile(self.copy_only_name_pattern) if self.copy_only_name_pattern else None
