# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias

from .._http import URI, Fields
from ..exceptions import UnexpectedStatusError

RequestBody: TypeAlias = bytes | bytearray | AsyncIterable[bytes]


@dataclass(kw_only=True)
class HTTPRequestConfiguration:
    """Request-level HTTP configuration.

    :param read_timeout: How long, in seconds, the client will wait for the response
        before timing out.
    """

    read_timeout: float | None = None


@dataclass(kw_only=True)
class HTTPRequest:
    """A signed S3 request, ready to be sent."""

    destination: URI
    method: str
    fields: Fields
    body: RequestBody = field(repr=False, default=b"")


@dataclass(kw_only=True)
class HTTPResponse:
    """The response to an S3 request, with its body fully read."""

    status: int
    """The 3 digit response status code (1xx, 2xx, 3xx, 4xx, 5xx)."""

    fields: Fields
    """The response headers."""

    body: bytes = field(repr=False, default=b"")

    reason: str | None = None
    """Optional string provided by the server explaining the status."""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def raise_for_status(self) -> None:
        """Raise :class:`UnexpectedStatusError` unless the status is 2xx."""
        if not self.ok:
            raise UnexpectedStatusError(self.status, self.reason)


class HTTPClient(Protocol):
    """An asynchronous HTTP client interface."""

    async def send(
        self,
        *,
        request: HTTPRequest,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request over the wire and return the response.

        :param request: The request including destination URI, fields, payload.
        :param request_config: Configuration specific to this request.
        """
        ...

    async def close(self) -> None:
        """Release the client's connections."""
        ...
