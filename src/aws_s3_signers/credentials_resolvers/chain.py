# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import Sequence
from typing import Final

from .._identity import AWSCredentials
from ..exceptions import NoCredentialsFoundError
from .environment import EnvironmentCredentialsSource
from .interfaces import CredentialsSource
from .profile import DEFAULT_PROFILE, ProfileCredentialsSource
from .properties import PropertiesCredentialsSource

logger: Final = logging.getLogger(__name__)


def _default_sources(profile: str | None) -> tuple[CredentialsSource, ...]:
    if profile is not None:
        return (ProfileCredentialsSource(profile),)
    return (
        PropertiesCredentialsSource(),
        EnvironmentCredentialsSource(),
        ProfileCredentialsSource(DEFAULT_PROFILE),
    )


class CredentialsResolverChain:
    """Resolves AWS Credentials from an ordered list of sources.

    Without a profile the chain checks process properties, then environment
    variables, then the ``default`` profile of the shared credentials file. Naming a
    profile restricts the chain to that profile alone.
    """

    def __init__(
        self,
        profile: str | None = None,
        *,
        sources: Sequence[CredentialsSource] | None = None,
    ):
        self._sources: Sequence[CredentialsSource] = (
            sources if sources is not None else _default_sources(profile)
        )

    @property
    def sources(self) -> Sequence[CredentialsSource]:
        return self._sources

    def resolve(self) -> AWSCredentials:
        """Return the credentials of the first source that has them.

        :raises NoCredentialsFoundError: If none of the sources have credentials.
        """
        for source in self._sources:
            logger.debug("Attempting to resolve credentials from %r", source)
            if (credentials := source()) is not None:
                logger.debug(
                    "Resolved credentials for %s from %r",
                    credentials.access_key_id,
                    source,
                )
                return credentials

        raise NoCredentialsFoundError(
            "None of the configured credentials sources were able to resolve "
            "credentials."
        )


def resolve_credentials(profile: str | None = None) -> AWSCredentials:
    """Resolve credentials with the default chain.

    :raises NoCredentialsFoundError: If no credentials are configured anywhere.
    """
    return CredentialsResolverChain(profile).resolve()
