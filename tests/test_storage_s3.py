from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from symstore.exceptions import BackendSetupError, S3Error
from symstore.objects.types import ObjectFormat, ObjectIdentity, ResourceType
from symstore.storage.s3 import S3Storage


class FakeS3Client:
    def __init__(self, existing=(), head_error: str | None = None) -> None:
        self.objects = set(existing)
        self.head_error = head_error
        self.heads: list[str] = []
        self.uploads: list[tuple[str, str, str]] = []

    def head_object(self, Bucket: str, Key: str) -> dict:
        self.heads.append(Key)
        if self.head_error:
            raise ClientError({"Error": {"Code": self.head_error}, "ResponseMetadata": {"HTTPStatusCode": 403}}, "HeadObject")
        if Key in self.objects:
            return {"ContentLength": 1}
        raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}, "ResponseMetadata": {"HTTPStatusCode": 404}}, "HeadObject")

    def upload_file(self, Filename: str, Bucket: str, Key: str) -> None:
        self.uploads.append((Filename, Bucket, Key))
        self.objects.add(Key)


@pytest.fixture
def identity(tmp_path: Path) -> ObjectIdentity:
    path = tmp_path / "libfoo.so"
    path.write_bytes(b"elf")
    return ObjectIdentity(path, ObjectFormat.ELF, ResourceType.EXECUTABLE, "abcd", 3)


def test_prefix_is_prepended_verbatim() -> None:
    storage = S3Storage("symbols", prefix="store/", client=FakeS3Client())
    assert storage.destination("buildid/ab/executable") == "s3://symbols/store/buildid/ab/executable"


def test_exists(identity: ObjectIdentity) -> None:
    client = FakeS3Client(existing={"p/buildid/abcd/executable"})
    storage = S3Storage("symbols", prefix="p/", client=client)
    assert storage.exists("buildid/abcd/executable") is True
    assert storage.exists("buildid/ffff/executable") is False
    assert client.heads == ["p/buildid/abcd/executable", "p/buildid/ffff/executable"]


def test_exists_other_error_raises() -> None:
    storage = S3Storage("symbols", client=FakeS3Client(head_error="AccessDenied"))
    with pytest.raises(S3Error):
        storage.exists("k")


def test_put_file(identity: ObjectIdentity) -> None:
    client = FakeS3Client()
    storage = S3Storage("symbols", prefix="p/", client=client)
    destination = storage.put_file("buildid/abcd/executable", identity)
    assert destination == "s3://symbols/p/buildid/abcd/executable"
    assert client.uploads == [(str(identity.path), "symbols", "p/buildid/abcd/executable")]


@pytest.fixture
def no_aws(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN", "AWS_PROFILE", "AWS_DEFAULT_PROFILE",
        "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI", "AWS_CONTAINER_CREDENTIALS_FULL_URI", "AWS_WEB_IDENTITY_TOKEN_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")


def test_unknown_region_is_fatal(no_aws) -> None:
    with pytest.raises(BackendSetupError, match="region"):
        S3Storage("symbols", region="mars-north-1", access_key_id="a", secret_access_key="b")


def test_unknown_profile_is_fatal(no_aws) -> None:
    with pytest.raises(BackendSetupError, match="profile"):
        S3Storage("symbols", region="us-east-1", profile="does-not-exist")


def test_missing_credentials_is_fatal(no_aws) -> None:
    with pytest.raises(BackendSetupError, match="credentials"):
        S3Storage("symbols", region="us-east-1")


def test_explicit_keys_build_client(no_aws) -> None:
    storage = S3Storage(
        "symbols",
        endpoint_url="https://s3.us-west-002.backblazeb2.com",
        access_key_id="key-id",
        secret_access_key="key",
    )
    assert storage.client.meta.endpoint_url == "https://s3.us-west-002.backblazeb2.com"
