# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import base64
import hmac
from collections.abc import AsyncIterator
from hashlib import sha1
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer
from aws_s3_signers import AsyncFileReader, AWSCredentials, AWSV2Signature, Fields
from aws_s3_signers.aio.client import S3Client
from aws_s3_signers.config import S3ClientConfig

CREDENTIALS = AWSCredentials(access_key_id="AK", secret_access_key="SK")


@pytest.fixture
async def server() -> AsyncIterator[tuple[LocalServer, list[dict[str, Any]]]]:
    received: list[dict[str, Any]] = []

    async def handler(request: web.Request) -> web.Response:
        received.append(
            {
                "method": request.method,
                "bucket": request.match_info["bucket"],
                "key": request.match_info["key"],
                "headers": list(request.headers.items()),
                "body": await request.read(),
            }
        )
        return web.Response(text="ok")

    app = web.Application()
    app.router.add_route("*", "/{bucket}/{key:.*}", handler)
    async with LocalServer(app) as test_server:
        yield test_server, received


def make_client(test_server: LocalServer, signature_version: str) -> S3Client:
    config = S3ClientConfig(
        endpoint_uri=f"http://{test_server.host}:{test_server.port}",
        signature_version=signature_version,
    )
    config.resolve(environment_loader=dict)
    return S3Client(config, credentials=CREDENTIALS)


def expected_v2_authorization(request: dict[str, Any]) -> str:
    """Rebuild the V2 signature from the headers that actually arrived."""
    fields = Fields()
    for name, value in request["headers"]:
        fields.add(name, value)
    string_to_sign = AWSV2Signature(CREDENTIALS).string_to_sign(
        fields=fields,
        method=request["method"],
        bucket=request["bucket"],
        key=request["key"],
    )
    digest = hmac.new(b"SK", string_to_sign.encode("utf-8"), sha1).digest()
    return f"AWS AK:{base64.b64encode(digest).decode('ascii')}"


def header(request: dict[str, Any], name: str) -> str | None:
    for key, value in request["headers"]:
        if key.lower() == name.lower():
            return value
    return None


@pytest.mark.parametrize(
    "method,args,content_type",
    [
        ("get", (), None),
        ("head", (), None),
        ("delete", (), None),
        ("put", (b"hello",), None),
        ("put", (b"hello",), "text/plain"),
    ],
)
async def test_v2_signature_matches_received_headers(
    server: tuple[LocalServer, list[dict[str, Any]]],
    method: str,
    args: tuple[Any, ...],
    content_type: str | None,
) -> None:
    test_server, received = server
    kwargs = {"content_type": content_type} if content_type else {}
    async with make_client(test_server, "v2") as client:
        response = await getattr(client, method)("bucket", "key", *args, **kwargs)

    assert response.status == 200
    (request,) = received
    assert header(request, "Content-Type") == content_type
    assert header(request, "Authorization") == expected_v2_authorization(request)
    if args:
        assert request["body"] == args[0]


async def test_v4_file_upload_arrives_complete(
    server: tuple[LocalServer, list[dict[str, Any]]], tmp_path: Path
) -> None:
    test_server, received = server
    contents = bytes(range(256)) * 800
    path = tmp_path / "upload.bin"
    path.write_bytes(contents)

    async with make_client(test_server, "v4") as client:
        async with AsyncFileReader(path, chunk_size=4096) as body:
            response = await client.put("bucket", "upload.bin", body)

    assert response.status == 200
    (request,) = received
    assert request["body"] == contents
    assert header(request, "Content-Length") == str(len(contents))
    assert header(request, "Content-Type") is None
