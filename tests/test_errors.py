import pytest
from botocore.exceptions import (
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
)

from bucket_export.errors import (
    ConfigError,
    EndpointError,
    ErrorKind,
    classify_error,
    describe_error,
    log_and_reraise,
)
from conftest import client_error


@pytest.mark.parametrize(
    "exc, kind",
    [
        (client_error("InvalidAccessKeyId"), ErrorKind.INVALID_ACCESS_KEY),
        (client_error("SignatureDoesNotMatch"), ErrorKind.BAD_SIGNATURE),
        (NoCredentialsError(), ErrorKind.MISSING_CREDENTIALS),
        (PartialCredentialsError(provider="env", cred_var="secret_key"), ErrorKind.MISSING_CREDENTIALS),
        (EndpointConnectionError(endpoint_url="https://s3.nowhere"), ErrorKind.UNKNOWN_ENDPOINT),
        (EndpointError("no region"), ErrorKind.UNKNOWN_ENDPOINT),
        (client_error("AccessDenied"), ErrorKind.OTHER),
        (RuntimeError("x"), ErrorKind.OTHER),
    ],
)
def test_classify_error(exc, kind):
    assert classify_error(exc) is kind


def test_describe_known_kinds():
    assert describe_error(client_error("InvalidAccessKeyId")) == (
        "The provided Cloud Object Storage `access_key_id` is invalid."
    )
    assert describe_error(client_error("SignatureDoesNotMatch")) == (
        "The provided Cloud Object Storage `secret_access_key` is invalid."
    )
    assert describe_error(NoCredentialsError()) == "No Cloud Object Storage credentials were provided."
    assert describe_error(EndpointConnectionError(endpoint_url="https://x")) == (
        "The provided Cloud Object Storage `region` is invalid."
    )


def test_describe_falls_back_to_code_and_message():
    exc = client_error("AccessDenied", "Access Denied")
    assert describe_error(exc) == "AccessDenied - Access Denied"
    assert describe_error(RuntimeError("socket closed")) == "RuntimeError - socket closed"


def test_log_and_reraise_wraps_foreign_errors():
    @log_and_reraise(ConfigError)
    def broken():
        raise KeyError("missing")

    with pytest.raises(ConfigError) as exc:
        broken()
    assert "broken failed" in str(exc.value)
    assert isinstance(exc.value.__cause__, KeyError)


def test_log_and_reraise_passes_own_errors_through():
    original = ConfigError("bad section")

    @log_and_reraise(ConfigError)
    def strict():
        raise original

    with pytest.raises(ConfigError) as exc:
        strict()
    assert exc.value is original


@pytest.mark.parametrize("code", ["CredentialsError", "UnknownEndpoint", "missing_credentials"])
def test_unmapped_client_codes_fall_back_to_other(code):
    exc = client_error(code, "nope")
    assert classify_error(exc) is ErrorKind.OTHER
    assert describe_error(exc) == f"{code} - nope"
