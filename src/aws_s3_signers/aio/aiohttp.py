# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from itertools import chain
from typing import Final

import aiohttp
from yarl import URL

from .._http import Fields
from ..interfaces.http import FieldPosition
from . import HTTPClient, HTTPRequest, HTTPRequestConfiguration, HTTPResponse

logger: Final = logging.getLogger(__name__)


class AIOHTTPClient(HTTPClient):
    """Implementation of :py:class:`HTTPClient` using aiohttp."""

    def __init__(self, *, _session: aiohttp.ClientSession | None = None) -> None:
        # The session is created on first use, since it must be created inside a
        # running event loop.
        self._session = _session

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def send(
        self,
        *,
        request: HTTPRequest,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request using aiohttp client.

        :param request: The request including destination URI, fields, payload.
        :param request_config: Configuration specific to this request.
        """
        request_config = request_config or HTTPRequestConfiguration()

        headers_list = list(
            chain.from_iterable(
                fld.as_tuples()
                for fld in request.fields.get_by_type(FieldPosition.HEADER)
            )
        )
        # The path and query were signed as they are, so they must not be re-encoded.
        url = URL(request.destination.build(), encoded=True)
        timeout = aiohttp.ClientTimeout(sock_read=request_config.read_timeout)

        logger.debug("Sending %s %s", request.method, url)
        async with self.session.request(
            method=request.method,
            url=url,
            headers=headers_list,
            data=request.body or None,
            # Content-Type takes part in V2 signatures, so only a signed one is sent.
            skip_auto_headers=("Content-Type",),
            timeout=timeout,
        ) as resp:
            return await self._marshal_response(resp)

    async def _marshal_response(
        self, aiohttp_resp: aiohttp.ClientResponse
    ) -> HTTPResponse:
        """Convert a ``aiohttp.ClientResponse`` to an :py:class:`HTTPResponse`."""
        headers = Fields()
        for header_name, header_val in aiohttp_resp.headers.items():
            headers.add(header_name, header_val)

        return HTTPResponse(
            status=aiohttp_resp.status,
            fields=headers,
            body=await aiohttp_resp.read(),
            reason=aiohttp_resp.reason,
        )

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
