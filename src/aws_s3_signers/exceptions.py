# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class BaseS3SignersException(Exception):
    """Top-level exception to capture S3 authentication errors."""


class NoCredentialsFoundError(BaseS3SignersException):
    """Every source in the credential resolution chain came back empty."""


class ConfigurationError(BaseS3SignersException, ValueError):
    """A signature or client was configured with missing or invalid values."""


class DigestError(BaseS3SignersException):
    """The request payload could not be hashed.

    The underlying stream or hashing error is available as ``__cause__``.
    """


class SigningError(BaseS3SignersException):
    """The signing key material was rejected while computing a signature."""


class MissingExpectedParameterException(BaseS3SignersException, ValueError):
    """Some signing steps require specific signing properties to be present."""


class UnexpectedStatusError(BaseS3SignersException):
    """S3 answered with a status code the caller didn't expect."""

    def __init__(self, status: int, reason: str | None = None) -> None:
        self.status = status
        self.reason = reason
        message = f"Unexpected response status {status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
