# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from .._identity import AWSCredentials


def build_credentials(
    access_key_id: str | None,
    secret_access_key: str | None,
    session_token: str | None = None,
) -> AWSCredentials | None:
    """Build credentials from raw values, as read from a credentials source.

    Values are trimmed and blank values count as missing. Returns None unless both the
    access key id and the secret access key are present.
    """
    access_key_id = _trim(access_key_id)
    secret_access_key = _trim(secret_access_key)
    if access_key_id is None or secret_access_key is None:
        return None
    return AWSCredentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=_trim(session_token),
    )


def _trim(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class StaticCredentialsSource:
    """Supplies a fixed set of credentials."""

    def __init__(self, credentials: AWSCredentials) -> None:
        self._credentials = credentials

    def __call__(self) -> AWSCredentials | None:
        return self._credentials

    def __repr__(self) -> str:
        return f"StaticCredentialsSource({self._credentials!r})"
