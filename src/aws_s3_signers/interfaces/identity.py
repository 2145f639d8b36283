# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Identity(Protocol):
    """An entity available to the client representing who the user is."""

    expiration: datetime | None = None
    """The expiration time of the identity, always in UTC."""

    @property
    def is_expired(self) -> bool:
        """Whether the identity is expired."""
        if self.expiration is None:
            return False
        return datetime.now(tz=UTC) >= self.expiration


@runtime_checkable
class AWSCredentialsIdentity(Identity, Protocol):
    """AWS access key credentials used to sign S3 requests."""

    access_key_id: str | None
    """A unique identifier for an AWS user or role."""

    secret_access_key: str | None
    """The secret used to derive request signatures. Must never be logged."""

    session_token: str | None = None
    """A temporary token used to specify the current session for the supplied
    credentials."""

    @property
    def is_valid(self) -> bool:
        """Whether both the access key and the secret key are present."""
        return bool(self.access_key_id) and bool(self.secret_access_key)
