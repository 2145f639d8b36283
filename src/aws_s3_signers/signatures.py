# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import asyncio
import base64
import hmac
import logging
from asyncio import iscoroutinefunction
from collections.abc import AsyncIterable
from datetime import UTC, datetime
from email.utils import format_datetime
from enum import Enum
from hashlib import sha1, sha256
from typing import ClassVar, Final, TypeAlias

from ._http import URI, AWSRequest, Field, Fields
from ._identity import AWSCredentials
from .endpoints import DEFAULT_REGION, region_from_host
from .exceptions import ConfigurationError, DigestError, SigningError
from .interfaces.io import AsyncSeekable, ByteStream, ReadLengthLimited, Seekable
from .metadata import USER_METADATA_PREFIX
from .signers import (
    DEFAULT_PORTS,
    SIGV4_TIMESTAMP_FORMAT,
    SigV4Signer,
    SigV4SigningProperties,
)

logger: Final = logging.getLogger(__name__)

DEFAULT_DIGEST_TIMEOUT: Final = 60.0
S3_SERVICE_NAME: Final = "s3"

_AMZ_DATE = "X-Amz-Date"
_AMZ_SECURITY_TOKEN = "X-Amz-Security-Token"
_AMZ_CONTENT_SHA256 = "X-Amz-Content-SHA256"
_CONTENT_MD5 = "content-md5"
_CONTENT_TYPE = "content-type"

Payload: TypeAlias = bytes | bytearray | memoryview | ByteStream | AsyncIterable[bytes]


class SignatureVersion(Enum):
    """The S3 request signature algorithms."""

    V2 = "2"
    V4 = "4"


def _validate_credentials(credentials: AWSCredentials | None) -> AWSCredentials:
    if credentials is None or not credentials.is_valid:
        raise ConfigurationError(
            "Signing requires credentials with both an access key id and a secret "
            "access key."
        )
    return credentials


class AWSV2Signature:
    """The legacy S3 signature: base64 HMAC-SHA1 over a newline-joined string.

    V2 signing is synchronous and only meant for payloads that are already in memory.
    An instance holds no mutable state, so it can be shared by concurrent requests.
    """

    version: ClassVar[SignatureVersion] = SignatureVersion.V2

    def __init__(
        self, credentials: AWSCredentials, *, session_token: str | None = None
    ):
        """Initialize the signature.

        :param credentials: The credentials to sign with.
        :param session_token: A session token to send with each request. Defaults to
            the credentials' own token.
        """
        self.credentials = _validate_credentials(credentials)
        self.session_token = (
            session_token if session_token is not None else credentials.session_token
        )

    def get_authorization(
        self,
        *,
        fields: Fields,
        method: str,
        bucket: str,
        key: str = "",
        payload: bytes = b"",
    ) -> str:
        """Compute the ``Authorization`` value for an S3 request.

        ``X-Amz-Date``, and ``X-Amz-Security-Token`` when a session token is set, are
        written into ``fields`` so they are sent with the request. The payload itself
        doesn't take part in a V2 signature.
        """
        amz_date = format_datetime(datetime.now(UTC), usegmt=True)
        fields.set_field(Field(name=_AMZ_DATE, values=[amz_date]))
        if self.session_token:
            fields.set_field(
                Field(name=_AMZ_SECURITY_TOKEN, values=[self.session_token])
            )

        logger.debug("Signing %s /%s/%s with signature version 2", method, bucket, key)
        string_to_sign = self.string_to_sign(
            fields=fields, method=method, bucket=bucket, key=key
        )
        assert self.credentials.secret_access_key is not None
        try:
            digest = hmac.new(
                self.credentials.secret_access_key.encode("utf-8"),
                string_to_sign.encode("utf-8"),
                sha1,
            ).digest()
        except ValueError as err:
            raise SigningError(
                "The secret access key was rejected while computing the signature."
            ) from err
        signature = base64.b64encode(digest).decode("ascii")
        return f"AWS {self.credentials.access_key_id}:{signature}"

    def string_to_sign(
        self, *, fields: Fields, method: str, bucket: str, key: str = ""
    ) -> str:
        """Build the canonical string that gets signed.

            <Method>\n
            <Content-MD5>\n
            <Content-Type>\n
            \n
            <name:value\n for each signed x-amz header, sorted by name>
            /<bucket>/<key>

        A key that starts with ``?`` is a bucket-level query such as ``?list-type=2``
        and is left out of the resource.
        """
        content_md5 = ""
        content_type = ""
        amz_headers: dict[str, str] = {}
        for field in fields:
            name = field.name.lower()
            if name == _CONTENT_MD5:
                content_md5 = field.as_string()
            elif name == _CONTENT_TYPE:
                content_type = field.as_string()
            elif self._is_signed_amz_header(name):
                amz_headers[name] = ",".join(field.values)

        signed_lines = "".join(
            f"{name}:{value}\n" for name, value in sorted(amz_headers.items())
        )
        if not key or key.startswith("?"):
            key = ""
        return (
            f"{method}\n{content_md5}\n{content_type}\n\n{signed_lines}/{bucket}/{key}"
        )

    def _is_signed_amz_header(self, name: str) -> bool:
        return (
            name == _AMZ_DATE.lower()
            or name == _AMZ_SECURITY_TOKEN.lower()
            or name.startswith(USER_METADATA_PREFIX)
        )

    def __repr__(self) -> str:
        return f"AWSV2Signature(credentials={self.credentials!r})"


class AWSV4Signature:
    """The S3 flavour of AWS Signature Version 4, bound to one request URI.

    Hashing a payload may need to stream a file, so :meth:`get_authorization` is a
    coroutine. The canonical request and signing key are delegated to
    :class:`~aws_s3_signers.signers.SigV4Signer`.
    """

    version: ClassVar[SignatureVersion] = SignatureVersion.V4

    def __init__(
        self,
        host: URI,
        credentials: AWSCredentials,
        *,
        region: str | None = None,
        digest_timeout: float = DEFAULT_DIGEST_TIMEOUT,
        signer: SigV4Signer | None = None,
    ):
        """Initialize the signature.

        :param host: The URI requests are sent to. Its path and query are signed.
        :param credentials: The credentials to sign with.
        :param region: The signing region. When unset it is derived from the host,
            falling back to ``us-east-1``.
        :param digest_timeout: Seconds allowed for hashing a streamed payload.
        :param signer: The SigV4 routine to delegate to.
        """
        self.host = host
        self.credentials = _validate_credentials(credentials)
        self.region = region or region_from_host(host.host) or DEFAULT_REGION
        self.digest_timeout = digest_timeout
        self._signer = signer or SigV4Signer()

    async def get_authorization(
        self, *, fields: Fields, method: str, payload: Payload = b""
    ) -> str:
        """Compute the ``Authorization`` value for an S3 request.

        The payload may be in-memory bytes, a seekable buffer such as ``io.BytesIO``,
        or a seekable async file reader. A file reader is rewound after hashing and,
        when it supports it, limited to the number of bytes that were hashed. It is
        never closed.

        ``Host``, ``X-Amz-Date``, ``X-Amz-Content-SHA256`` and, for temporary
        credentials, ``X-Amz-Security-Token`` are written into ``fields``.

        :raises DigestError: If the payload couldn't be read or hashed in time.
        :raises SigningError: If the secret key couldn't be used as key material.
        """
        content_sha256 = await self._digest(payload)
        timestamp = datetime.now(UTC).strftime(SIGV4_TIMESTAMP_FORMAT)

        signing_fields = Fields()
        if self.credentials.session_token:
            fields.set_field(
                Field(name=_AMZ_SECURITY_TOKEN, values=[self.credentials.session_token])
            )
            signing_fields.set_field(
                Field(name=_AMZ_SECURITY_TOKEN, values=[self.credentials.session_token])
            )

        for field in fields:
            name = field.name.lower()
            if name.startswith(USER_METADATA_PREFIX) or name in (
                _CONTENT_MD5,
                _CONTENT_TYPE,
            ):
                signing_fields.set_field(Field(name=field.name, values=field.values))

        for name, value in (
            ("Host", self._host_header()),
            (_AMZ_DATE, timestamp),
            (_AMZ_CONTENT_SHA256, content_sha256),
        ):
            fields.set_field(Field(name=name, values=[value]))
            signing_fields.set_field(Field(name=name, values=[value]))

        logger.debug(
            "Signing %s %s with signature version 4 in %s",
            method,
            self.host.path or "/",
            self.region,
        )
        request = AWSRequest(
            destination=self.host, method=method, body=None, fields=signing_fields
        )
        signing_properties = SigV4SigningProperties(
            region=self.region,
            service=S3_SERVICE_NAME,
            date=timestamp,
            uri_encode_path=False,
        )
        try:
            signed = self._signer.sign(
                signing_properties=signing_properties,
                http_request=request,
                identity=self.credentials,
            )
        except UnicodeEncodeError as err:
            raise SigningError(
                "The secret access key was rejected while computing the signature."
            ) from err
        return signed.fields["Authorization"].as_string()

    async def _digest(self, payload: Payload) -> str:
        match payload:
            case bytes() | bytearray() | memoryview():
                return sha256(payload).hexdigest()
            case AsyncIterable() if self._is_async_seekable(payload):
                return await self._digest_stream(payload)
            case Seekable() if isinstance(payload, ByteStream):
                position = payload.tell()
                try:
                    return sha256(payload.read()).hexdigest()
                except (OSError, ValueError) as err:
                    raise DigestError("Unable to hash the request payload.") from err
                finally:
                    payload.seek(position)
            case _:
                raise TypeError(
                    "Expected the payload to be bytes, a seekable buffer or a seekable "
                    f"async file reader, but received {type(payload)}."
                )

    def _is_async_seekable(self, payload: object) -> bool:
        # runtime_checkable can't tell sync and async seek methods apart.
        return isinstance(payload, AsyncSeekable) and iscoroutinefunction(payload.seek)

    async def _digest_stream(self, payload: AsyncIterable[bytes]) -> str:
        assert isinstance(payload, AsyncSeekable)
        checksum = sha256()
        total = 0
        try:
            async with asyncio.timeout(self.digest_timeout):
                await payload.seek(0)
                async for chunk in payload:
                    checksum.update(chunk)
                    total += len(chunk)
                await payload.seek(0)
        except TimeoutError as err:
            raise DigestError(
                f"Hashing the request payload took longer than {self.digest_timeout} "
                "seconds."
            ) from err
        except Exception as err:
            raise DigestError("Unable to hash the request payload.") from err

        if isinstance(payload, ReadLengthLimited):
            payload.set_read_length(total)
        logger.debug("Hashed %s bytes of streamed payload", total)
        return checksum.hexdigest()

    def _host_header(self) -> str:
        port = self.host.port
        if port is None or DEFAULT_PORTS.get(self.host.scheme) == port:
            return self.host.host
        return f"{self.host.host}:{port}"

    def __repr__(self) -> str:
        return (
            f"AWSV4Signature(host={self.host.netloc!r}, region={self.region!r}, "
            f"credentials={self.credentials!r})"
        )


Signature: TypeAlias = AWSV2Signature | AWSV4Signature
