"""Tests for blob storage drivers and signing."""

import asyncio

import pytest
from botocore.exceptions import ClientError

from asset_catalog.config import Settings
from asset_catalog.services.image_store import blob_name_from_url, sibling_blob_name
from asset_catalog.storage import StorageError, get_storage_driver
from asset_catalog.storage.local_driver import LocalStorageDriver
from asset_catalog.storage.s3_driver import MAX_PRESIGN_SECONDS, S3StorageDriver
from asset_catalog.storage.signing import sign_blob_name, verify_blob_token


class TestSigning:
    """Tests for blob token signing."""

    def test_valid_token(self):
        token = sign_blob_name("a_high.jpg", "secret", expires_in=60, now=1000)
        assert verify_blob_token(token, "a_high.jpg", "secret", now=1059)

    def test_expired_token(self):
        token = sign_blob_name("a_high.jpg", "secret", expires_in=60, now=1000)
        assert not verify_blob_token(token, "a_high.jpg", "secret", now=1060)

    def test_wrong_blob(self):
        token = sign_blob_name("a_high.jpg", "secret", expires_in=60)
        assert not verify_blob_token(token, "a_low.jpg", "secret")

    def test_wrong_secret(self):
        token = sign_blob_name("a_high.jpg", "secret", expires_in=60)
        assert not verify_blob_token(token, "a_high.jpg", "other-secret")

    def test_garbage(self):
        assert not verify_blob_token("garbage", "a_high.jpg", "secret")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://acct.blob.core.windows.net/asset-images/ab_high.jpg?sv=1&sig=x", "ab_high.jpg"),
        ("http://testserver/api/blobs/ab_low.jpg?token=t", "ab_low.jpg"),
        ("http://testserver/api/blobs/ab%5Flow.jpg", "ab_low.jpg"),
        ("http://host/", None),
        ("http://host/..", None),
        ("", None),
    ],
)
def test_blob_name_from_url(url, expected):
    assert blob_name_from_url(url) == expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("abc_high.jpg", "abc_low.jpg"),
        ("abc_low.jpg", "abc_high.jpg"),
        ("abc.png", None),
    ],
)
def test_sibling_blob_name(name, expected):
    assert sibling_blob_name(name) == expected


class TestLocalDriver:
    """Tests for LocalStorageDriver."""

    @pytest.fixture
    def driver(self, tmp_path):
        return LocalStorageDriver(
            {
                "base_path": str(tmp_path),
                "public_base_url": "http://localhost:8000/",
                "url_prefix": "/api",
                "secret_key": "secret",
            }
        )

    def test_round_trip(self, driver):
        async def scenario():
            await driver.upload_file("x_high.jpg", b"data", "image/jpeg")
            assert await driver.file_exists("x_high.jpg")
            info = await driver.get_file_info("x_high.jpg")
            content = await driver.download_file("x_high.jpg")
            await driver.delete_file("x_high.jpg")
            return info, content, await driver.file_exists("x_high.jpg")

        info, content, exists_after = asyncio.run(scenario())
        assert content == b"data"
        assert info.size_bytes == 4
        assert info.content_type == "image/jpeg"
        assert exists_after is False

    def test_delete_missing_is_quiet(self, driver):
        asyncio.run(driver.delete_file("never-there.jpg"))

    def test_download_missing(self, driver):
        with pytest.raises(FileNotFoundError):
            asyncio.run(driver.download_file("never-there.jpg"))

    def test_rejects_traversal(self, driver):
        with pytest.raises(StorageError):
            asyncio.run(driver.upload_file("../escape.jpg", b"x"))

    def test_signed_url(self, driver):
        url = asyncio.run(driver.generate_signed_url("x_high.jpg", 3600))
        assert url.startswith("http://localhost:8000/api/blobs/x_high.jpg?token=")


class TestFactory:
    """Tests for get_storage_driver."""

    def test_local(self, tmp_path):
        settings = Settings(_env_file=None, blob_base_path=str(tmp_path), blob_container="imgs")
        driver = get_storage_driver(settings)
        assert isinstance(driver, LocalStorageDriver)
        assert driver.base_path == (tmp_path / "imgs").resolve()

    def test_s3(self):
        settings = Settings(
            _env_file=None,
            blob_provider="s3",
            s3_bucket="bucket",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
        )
        assert isinstance(get_storage_driver(settings), S3StorageDriver)

    def test_s3_missing_credentials(self):
        settings = Settings(
            _env_file=None,
            blob_provider="s3",
            s3_bucket="bucket",
            aws_access_key_id=None,
            aws_secret_access_key=None,
        )
        with pytest.raises(StorageError):
            get_storage_driver(settings)

    def test_unknown_provider(self):
        with pytest.raises(StorageError):
            get_storage_driver(Settings(_env_file=None, blob_provider="ftp"))


def _client_error(code, operation):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class StubBody:
    def __init__(self, content):
        self.content = content

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def read(self):
        return self.content


class StubS3:
    """In-memory stand-in for an aioboto3 S3 client."""

    def __init__(self):
        self.objects = {}
        self.presign_calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def put_object(self, Bucket, Key, Body, **kwargs):
        self.objects[Key] = (Body, kwargs.get("ContentType"))

    async def get_object(self, Bucket, Key):
        if Key not in self.objects:
            raise _client_error("NoSuchKey", "GetObject")
        return {"Body": StubBody(self.objects[Key][0])}

    async def head_object(self, Bucket, Key):
        if Key not in self.objects:
            raise _client_error("404", "HeadObject")
        body, content_type = self.objects[Key]
        return {"ContentLength": len(body), "LastModified": None, "ContentType": content_type}

    async def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)

    async def generate_presigned_url(self, operation, Params, ExpiresIn):
        self.presign_calls.append((operation, Params, ExpiresIn))
        return f"https://s3.example/{Params['Bucket']}/{Params['Key']}?X-Amz-Expires={ExpiresIn}"

    async def head_bucket(self, Bucket):
        if Bucket != "bucket":
            raise _client_error("NoSuchBucket", "HeadBucket")


class StubSession:
    def __init__(self, s3):
        self.s3 = s3

    def client(self, service_name, **kwargs):
        return self.s3


class TestS3Driver:
    """Tests for S3StorageDriver against a stubbed client."""

    @pytest.fixture
    def s3(self):
        return StubS3()

    @pytest.fixture
    def driver(self, s3):
        driver = S3StorageDriver(
            {
                "bucket_name": "bucket",
                "aws_access_key_id": "key",
                "aws_secret_access_key": "secret",
                "base_path": "asset-images",
            }
        )
        driver.session = StubSession(s3)
        return driver

    def test_keys_are_prefixed_with_container(self, driver, s3):
        asyncio.run(driver.upload_file("x_high.jpg", b"data", "image/jpeg"))
        assert s3.objects == {"asset-images/x_high.jpg": (b"data", "image/jpeg")}

    def test_round_trip(self, driver):
        async def scenario():
            await driver.upload_file("x_low.jpg", b"jpeg", "image/jpeg")
            info = await driver.get_file_info("x_low.jpg")
            return info, await driver.download_file("x_low.jpg")

        info, content = asyncio.run(scenario())
        assert content == b"jpeg"
        assert info.name == "x_low.jpg"
        assert info.size_bytes == 4
        assert info.content_type == "image/jpeg"

    def test_missing_object_download(self, driver):
        with pytest.raises(FileNotFoundError):
            asyncio.run(driver.download_file("gone.jpg"))

    def test_missing_object_info(self, driver):
        with pytest.raises(FileNotFoundError):
            asyncio.run(driver.get_file_info("gone.jpg"))
        assert asyncio.run(driver.file_exists("gone.jpg")) is False

    def test_presign_is_capped(self, driver, s3):
        url = asyncio.run(driver.generate_signed_url("x_high.jpg", 365 * 24 * 3600))

        operation, params, expires_in = s3.presign_calls[0]
        assert operation == "get_object"
        assert params == {"Bucket": "bucket", "Key": "asset-images/x_high.jpg"}
        assert expires_in == MAX_PRESIGN_SECONDS
        assert url.endswith(f"X-Amz-Expires={MAX_PRESIGN_SECONDS}")

    def test_short_expiry_is_kept(self, driver, s3):
        asyncio.run(driver.generate_signed_url("x_high.jpg", 600))
        assert s3.presign_calls[0][2] == 600

    def test_connection(self, driver):
        assert asyncio.run(driver.test_connection()) is True

    def test_missing_bucket(self, driver):
        driver.bucket_name = "other"
        with pytest.raises(StorageError):
            asyncio.run(driver.test_connection())
