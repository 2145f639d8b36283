# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from typing import Final, Self

from ._http import URI, parse_uri
from ._identity import AWSCredentials
from .credentials_resolvers.static import build_credentials
from .exceptions import ConfigurationError
from .signatures import (
    DEFAULT_DIGEST_TIMEOUT,
    AWSV2Signature,
    AWSV4Signature,
    Signature,
    SignatureVersion,
)

logger: Final = logging.getLogger(__name__)


class SignatureFactory:
    """Builds a configured :data:`~aws_s3_signers.signatures.Signature`.

    Setters return the factory so calls can be chained::

        signature = (
            SignatureFactory.get_factory()
            .set_host("https://s3.us-west-2.amazonaws.com/bucket/key")
            .set_credentials(credentials)
            .get_signature()
        )
    """

    def __init__(
        self,
        version: SignatureVersion = SignatureVersion.V4,
        *,
        digest_timeout: float = DEFAULT_DIGEST_TIMEOUT,
    ):
        self.version = version
        self.digest_timeout = digest_timeout
        self._host: URI | None = None
        self._region: str | None = None
        self._credentials: AWSCredentials | None = None

    @classmethod
    def get_factory(cls, version: SignatureVersion = SignatureVersion.V4) -> Self:
        return cls(version)

    def set_host(self, uri: str | URI) -> Self:
        """Set the request URI the signature is bound to.

        :raises ConfigurationError: If ``uri`` is a string without a host.
        """
        if isinstance(uri, str):
            try:
                uri = parse_uri(uri)
            except ValueError as err:
                raise ConfigurationError(str(err)) from err
        self._host = uri
        return self

    def set_region(self, region: str | None) -> Self:
        self._region = region
        return self

    def set_credentials(self, credentials: AWSCredentials | None) -> Self:
        """Set the credentials to sign with.

        :raises ConfigurationError: If the credentials are missing or lack a key.
        """
        if credentials is None or not credentials.is_valid:
            raise ConfigurationError(
                "Credentials must include both an access key id and a secret "
                "access key."
            )
        self._credentials = credentials
        return self

    def set_keys(
        self,
        access_key_id: str | None,
        secret_access_key: str | None,
        session_token: str | None = None,
    ) -> Self:
        """Set the credentials to sign with from their parts.

        Blank values count as missing.

        :raises ConfigurationError: If either key is missing.
        """
        return self.set_credentials(
            build_credentials(access_key_id, secret_access_key, session_token)
        )

    def get_signature(self) -> Signature:
        """Build the signature for the configured version.

        :raises ConfigurationError: If credentials are missing, if a V4 signature
            has no host, or if the version isn't supported.
        """
        if self._credentials is None:
            raise ConfigurationError("Credentials must be set before signing.")

        match self.version:
            case SignatureVersion.V2:
                logger.debug("Building signature version 2")
                return AWSV2Signature(self._credentials)
            case SignatureVersion.V4:
                if self._host is None:
                    raise ConfigurationError(
                        "A host must be set for signature version 4."
                    )
                logger.debug("Building signature version 4 for %s", self._host.host)
                return AWSV4Signature(
                    self._host,
                    self._credentials,
                    region=self._region,
                    digest_timeout=self.digest_timeout,
                )
            case _:
                raise ConfigurationError(
                    f"Unsupported signature version: {self.version!r}"
                )


def build_signature(
    version: SignatureVersion,
    host: str | URI | None,
    credentials: AWSCredentials | None,
) -> Signature:
    """Build a signature in one call.

    :raises ConfigurationError: If the credentials are missing or invalid, or a V4
        signature is requested without a host.
    """
    factory = SignatureFactory.get_factory(version).set_credentials(credentials)
    if host is not None:
        factory.set_host(host)
    return factory.get_signature()
