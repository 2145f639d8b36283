# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field, replace
from datetime import datetime

from .interfaces.identity import AWSCredentialsIdentity


@dataclass(kw_only=True, frozen=True)
class AWSCredentials(AWSCredentialsIdentity):
    """An immutable set of access key credentials.

    Credentials are "valid" when both the access key and the secret key are present
    and non-empty. The session token is independent of validity.
    """

    access_key_id: str | None
    secret_access_key: str | None = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def has_session_token(self) -> bool:
        """Whether these credentials carry a temporary session token."""
        return self.session_token is not None

    def with_session_token(self, session_token: str | None) -> "AWSCredentials":
        """Return a copy of these credentials carrying ``session_token``.

        Used when temporary credentials are refreshed. The original instance is left
        untouched so it can keep being shared across concurrent signing calls.
        """
        return replace(self, session_token=session_token)
