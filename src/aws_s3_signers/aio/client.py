# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Any, Final, Self
from urllib.parse import quote

from .._http import URI, Field, Fields
from .._identity import AWSCredentials
from ..config import S3ClientConfig
from ..credentials_resolvers import CredentialsResolverChain
from ..endpoints import DEFAULT_ENDPOINT, S3Endpoint
from ..exceptions import ConfigurationError
from ..factory import SignatureFactory
from ..interfaces.io import ReadLengthLimited
from ..metadata import UserMetadata
from ..signatures import AWSV2Signature, SignatureVersion
from . import HTTPClient, HTTPRequest, HTTPResponse, RequestBody
from .aiohttp import AIOHTTPClient

logger: Final = logging.getLogger(__name__)

LIST_OBJECTS_QUERY = "list-type=2"


class S3Client:
    """A small async S3 client that signs and sends path-style requests.

    Responses are returned as they are. Call
    :meth:`~aws_s3_signers.aio.HTTPResponse.raise_for_status` to turn an error status
    into an exception::

        async with S3Client(S3ClientConfig(region="us-west-2")) as client:
            response = await client.get("my-bucket", "path/to/key")
            response.raise_for_status()
    """

    def __init__(
        self,
        config: S3ClientConfig | None = None,
        *,
        credentials: AWSCredentials | None = None,
        http_client: HTTPClient | None = None,
    ):
        """Initialize the client.

        :param config: The client configuration. It is resolved here if it hasn't
            been already.
        :param credentials: Credentials to sign with. When unset they come from the
            config, then from the credentials resolution chain.
        :param http_client: The transport. Defaults to an aiohttp based client.
        :raises NoCredentialsFoundError: If no credentials can be found.
        """
        self._config = config or S3ClientConfig()
        if not self._config.is_resolved:
            self._config.resolve()

        self._credentials = (
            credentials
            or self._config.credentials
            or CredentialsResolverChain(self._config.profile).resolve()
        )
        self._endpoint = self._resolve_endpoint()
        self._http_client = http_client or AIOHTTPClient()

    @property
    def endpoint(self) -> URI:
        return self._endpoint

    def _resolve_endpoint(self) -> URI:
        if self._config.endpoint_uri is not None:
            return self._config.endpoint_uri
        if (region := self._config.region) is None:
            return DEFAULT_ENDPOINT
        try:
            return S3Endpoint.from_region(region).uri
        except ValueError:
            return URI(host=f"s3.{region}.amazonaws.com")

    async def head(self, bucket: str, key: str) -> HTTPResponse:
        """Fetch the headers of an object."""
        return await self._send("HEAD", bucket, key)

    async def get(self, bucket: str, key: str) -> HTTPResponse:
        """Fetch an object."""
        return await self._send("GET", bucket, key)

    async def put(
        self,
        bucket: str,
        key: str,
        body: RequestBody,
        *,
        metadata: UserMetadata | None = None,
        content_type: str | None = None,
    ) -> HTTPResponse:
        """Upload an object.

        :param body: The object's contents, either in memory or as a seekable async
            reader such as :class:`~aws_s3_signers.AsyncFileReader`. Signature
            version 2 only accepts in-memory bodies.
        :param metadata: User metadata to store with the object.
        :param content_type: The object's media type.
        """
        fields = Fields(metadata.as_fields() if metadata is not None else None)
        if content_type is not None:
            fields.set_field(Field(name="Content-Type", values=[content_type]))
        return await self._send("PUT", bucket, key, fields=fields, body=body)

    async def delete(self, bucket: str, key: str) -> HTTPResponse:
        """Delete an object."""
        return await self._send("DELETE", bucket, key)

    async def list(self, bucket: str, prefix: str | None = None) -> HTTPResponse:
        """List the objects in a bucket, optionally only those under ``prefix``.

        The response body is the ``ListObjectsV2`` XML document.
        """
        query = LIST_OBJECTS_QUERY
        if prefix is not None:
            query = f"{query}&prefix={quote(prefix, safe='-_.~')}"
        return await self._send("GET", bucket, "", query=query)

    async def _send(
        self,
        method: str,
        bucket: str,
        key: str,
        *,
        query: str | None = None,
        fields: Fields | None = None,
        body: RequestBody = b"",
    ) -> HTTPResponse:
        fields = fields if fields is not None else Fields()
        encoded_key = quote(key, safe="/-_.~")
        base_path = (self._endpoint.path or "").rstrip("/")
        destination = URI(
            scheme=self._endpoint.scheme,
            host=self._endpoint.host,
            port=self._endpoint.port,
            path=f"{base_path}/{bucket}/{encoded_key}",
            query=query,
        )

        factory = (
            SignatureFactory(
                self._config.signature_version,
                digest_timeout=self._config.digest_timeout,
            )
            .set_host(destination)
            .set_region(self._config.region)
            .set_credentials(self._credentials)
        )
        signature = factory.get_signature()
        if isinstance(signature, AWSV2Signature):
            if not isinstance(body, bytes | bytearray):
                raise ConfigurationError(
                    "Signature version 2 can only sign in-memory request bodies."
                )
            authorization = signature.get_authorization(
                fields=fields,
                method=method,
                bucket=bucket,
                key=f"?{query}" if query else encoded_key,
                payload=bytes(body),
            )
        else:
            authorization = await signature.get_authorization(
                fields=fields, method=method, payload=body
            )
        fields.set_field(Field(name="Authorization", values=[authorization]))

        if isinstance(body, ReadLengthLimited) and body.read_length is not None:
            fields.set_field(
                Field(name="Content-Length", values=[str(body.read_length)])
            )

        logger.debug("Sending signed %s request for %s", method, destination.path)
        return await self._http_client.send(
            request=HTTPRequest(
                destination=destination, method=method, fields=fields, body=body
            )
        )

    @property
    def signature_version(self) -> SignatureVersion:
        return self._config.signature_version

    async def close(self) -> None:
        await self._http_client.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
