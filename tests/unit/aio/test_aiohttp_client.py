# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from unittest.mock import AsyncMock, MagicMock, Mock

from aws_s3_signers import URI, Field, Fields
from aws_s3_signers.aio import HTTPRequest, HTTPRequestConfiguration
from aws_s3_signers.aio.aiohttp import AIOHTTPClient
from yarl import URL


def mock_response() -> Mock:
    response = Mock()
    response.status = 200
    response.reason = "OK"
    response.headers.items.return_value = [
        ("Content-Type", "application/xml"),
        ("x-amz-meta-tag", "a"),
        ("X-Amz-Meta-Tag", "b"),
    ]
    response.read = AsyncMock(return_value=b"<ListBucketResult/>")
    return response


async def test_send() -> None:
    session = MagicMock()
    session.request.return_value.__aenter__.return_value = mock_response()
    client = AIOHTTPClient(_session=session)
    request = HTTPRequest(
        destination=URI(host="s3.amazonaws.com", path="/bucket/a%20key"),
        method="GET",
        fields=Fields(
            [
                Field(name="Authorization", values=["AWS4-HMAC-SHA256 sig"]),
                Field(name="X-Amz-Meta-Tag", values=["a", "b"]),
            ]
        ),
    )

    response = await client.send(
        request=request, request_config=HTTPRequestConfiguration(read_timeout=3)
    )

    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == URL("https://s3.amazonaws.com/bucket/a%20key", encoded=True)
    assert kwargs["url"].raw_path == "/bucket/a%20key"
    assert kwargs["headers"] == [
        ("Authorization", "AWS4-HMAC-SHA256 sig"),
        ("X-Amz-Meta-Tag", "a"),
        ("X-Amz-Meta-Tag", "b"),
    ]
    assert kwargs["timeout"].sock_read == 3
    assert kwargs["data"] is None
    assert kwargs["skip_auto_headers"] == ("Content-Type",)

    assert response.status == 200
    assert response.reason == "OK"
    assert response.body == b"<ListBucketResult/>"
    assert response.fields["content-type"].values == ["application/xml"]
    assert response.fields["x-amz-meta-tag"].values == ["a", "b"]


async def test_close() -> None:
    session = Mock()
    session.close = AsyncMock()
    client = AIOHTTPClient(_session=session)

    await client.close()
    await client.close()
    session.close.assert_awaited_once()
