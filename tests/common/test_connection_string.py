from __future__ import annotations

import pytest

from bucketstore.common.connection_string import ConnectionString


def test_invalid_key_raises():
    with pytest.raises(ValueError) as exc_info:
        ConnectionString.parse("wrongaccess=TestAccessKey;SecretKey=TestSecretKey")

    assert (
        str(exc_info.value)
        == "The option 'wrongaccess' cannot be recognized in connection string."
    )


@pytest.mark.parametrize(
    "key",
    [
        "AccessKey",
        "AccessKeyId",
        "Access Key",
        "Access Key ID",
        "Id",
        "accessKey",
        "access key",
        "access key id",
        "id",
    ],
)
def test_parses_access_key_aliases(key):
    parsed = ConnectionString.parse(f"{key}=TestAccessKey;SecretKey=TestSecretKey;")

    assert parsed.access_key == "TestAccessKey"
    assert parsed.secret_key == "TestSecretKey"
    assert parsed.region is None


@pytest.mark.parametrize(
    "key", ["SecretKey", "Secret Key", "Secret", "secretKey", "secret key", "secret"]
)
def test_parses_secret_key_aliases(key):
    parsed = ConnectionString.parse(f"AccessKey=TestAccessKey;{key}=TestSecretKey;")

    assert parsed.access_key == "TestAccessKey"
    assert parsed.secret_key == "TestSecretKey"


@pytest.mark.parametrize("key", ["Region", "region"])
def test_parses_region(key):
    parsed = ConnectionString.parse(
        f"AccessKey=TestAccessKey;SecretKey=TestSecretKey;{key}=TestRegion;"
    )

    assert parsed.region == "TestRegion"


@pytest.mark.parametrize("key", ["EndPoint", "End Point", "endPoint", "end point"])
def test_parses_endpoint(key):
    parsed = ConnectionString.parse(
        f"AccessKey=TestAccessKey;SecretKey=TestSecretKey;{key}=TestEndPoint;"
    )

    assert parsed.endpoint == "TestEndPoint"


@pytest.mark.parametrize("key", ["Bucket", "bucket"])
def test_parses_bucket(key):
    parsed = ConnectionString.parse(
        f"AccessKey=TestAccessKey;SecretKey=TestSecretKey;{key}=TestBucket"
    )

    assert parsed.bucket == "TestBucket"
    assert parsed.region is None


def test_bucket_defaults_to_storage():
    parsed = ConnectionString.parse("AccessKey=a;SecretKey=b")

    assert parsed.bucket == "storage"


def test_generates_connection_string():
    builder = ConnectionString(
        access_key="TestAccessKey",
        secret_key="TestSecretKey",
        region="TestRegion",
        endpoint="TestEndPoint",
    )

    assert (
        str(builder)
        == "AccessKey=TestAccessKey;SecretKey=TestSecretKey;Region=TestRegion;EndPoint=TestEndPoint;"
    )


def test_generates_connection_string_with_bucket():
    builder = ConnectionString(
        access_key="TestAccessKey", secret_key="TestSecretKey", region="TestRegion"
    )
    builder.bucket = "TestBucket"

    assert (
        str(builder)
        == "AccessKey=TestAccessKey;SecretKey=TestSecretKey;Region=TestRegion;Bucket=TestBucket;"
    )


def test_endpoint_scheme_controls_ssl():
    secure = ConnectionString.parse("EndPoint=https://minio.local:9000")
    plain = ConnectionString.parse("EndPoint=minio.local:9000")

    assert secure.secure is True
    assert secure.endpoint_url == "https://minio.local:9000"
    assert plain.secure is False
    assert plain.endpoint_url == "http://minio.local:9000"


def test_empty_connection_string_raises():
    with pytest.raises(ValueError, match="required"):
        ConnectionString.parse("")
