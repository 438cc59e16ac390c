from __future__ import annotations

from typing import Any, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from symstore.exceptions import BackendSetupError, S3Error
from symstore.objects.types import ObjectIdentity

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _known_regions(session: boto3.session.Session) -> set[str]:
    regions: set[str] = set()
    for partition in session.get_available_partitions():
        regions.update(session.get_available_regions("s3", partition_name=partition))
    return regions


class S3Storage:
    """S3 (or S3-compatible, e.g. Backblaze B2) bucket holding a symbol store."""

    supports_exists = True

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        *,
        profile: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        timeout_seconds: float = 60.0,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix
        self.name = f"s3 bucket '{bucket}'"
        self.client = client or self._make_client(
            region=region,
            profile=profile,
            endpoint_url=endpoint_url,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            timeout_seconds=timeout_seconds,
        )

    def _make_client(
        self,
        *,
        region: Optional[str],
        profile: Optional[str],
        endpoint_url: Optional[str],
        access_key_id: Optional[str],
        secret_access_key: Optional[str],
        timeout_seconds: float,
    ) -> Any:
        try:
            session = boto3.session.Session(
                profile_name=profile,
                region_name=region,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
            )
        except ProfileNotFound as exc:
            raise BackendSetupError(f"AWS profile '{profile}' not found", {"profile": str(profile)}) from exc

        if region and endpoint_url is None and region not in _known_regions(session):
            raise BackendSetupError(f"Unknown S3 region '{region}'", {"region": region})
        if session.get_credentials() is None:
            raise BackendSetupError(f"No credentials available for bucket '{self.bucket}'", {"bucket": self.bucket})

        config = Config(
            connect_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
            retries={"max_attempts": 3},
        )
        try:
            return session.client("s3", endpoint_url=endpoint_url, config=config)
        except (BotoCoreError, ValueError) as exc:
            raise BackendSetupError(f"Unable to create S3 client: {exc}", {"bucket": self.bucket}) from exc

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def destination(self, key: str) -> str:
        return f"s3://{self.bucket}/{self._key(key)}"

    def exists(self, key: str) -> bool:
        s3_key = self._key(key)
        try:
            self.client.head_object(Bucket=self.bucket, Key=s3_key)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if error.get("Code") in _MISSING_CODES or status == 404:
                return False
            raise S3Error(f"HEAD {self.destination(key)} failed: {exc}", {"key": s3_key}) from exc
        except BotoCoreError as exc:
            raise S3Error(f"HEAD {self.destination(key)} failed: {exc}", {"key": s3_key}) from exc
        return True

    def put_file(self, key: str, identity: ObjectIdentity) -> str:
        s3_key = self._key(key)
        try:
            self.client.upload_file(str(identity.path), self.bucket, s3_key)
        except (ClientError, BotoCoreError, S3UploadFailedError) as exc:
            raise S3Error(
                f"Failed to upload '{identity.path}' to S3: {exc}",
                {"key": s3_key, "path": str(identity.path)},
            ) from exc
        return self.destination(key)

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            close()


__all__ = ["S3Storage"]
