# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Protocol

from .._identity import AWSCredentials


class CredentialsSource(Protocol):
    """A single place credentials may be found, such as the environment."""

    def __call__(self) -> AWSCredentials | None:
        """Returns the credentials from this source, or None if it has none."""
        ...
