# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import os
from dataclasses import dataclass, replace
from functools import reduce
from pathlib import Path
from typing import Final

from .._identity import AWSCredentials
from .static import build_credentials

logger: Final = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
CREDENTIALS_FILE_ENV_VAR = "AWS_SHARED_CREDENTIALS_FILE"

ACCESS_KEY_FILE_PROPERTY = "aws_access_key_id"
SECRET_KEY_FILE_PROPERTY = "aws_secret_access_key"
SESSION_TOKEN_FILE_PROPERTY = "aws_session_token"


@dataclass(frozen=True)
class _ProfileSection:
    """The keys collected so far for one profile, folded one line at a time."""

    name: str
    in_profile: bool = False
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None

    def accept(self, line: str) -> "_ProfileSection":
        line = line.strip()
        if line == f"[{self.name}]":
            logger.debug("Found profile %r in the credentials file", self.name)
            return replace(self, in_profile=True)
        if line.startswith("[") and line.endswith("]"):
            return replace(self, in_profile=False)
        if not self.in_profile:
            return self

        # Keys are matched by prefix and the last occurrence wins.
        if line.startswith(ACCESS_KEY_FILE_PROPERTY):
            return replace(self, access_key_id=_value(line))
        if line.startswith(SECRET_KEY_FILE_PROPERTY):
            return replace(self, secret_access_key=_value(line))
        if line.startswith(SESSION_TOKEN_FILE_PROPERTY):
            return replace(self, session_token=_value(line))
        return self


def _value(line: str) -> str | None:
    _, sep, value = line.partition("=")
    return value.strip() if sep else None


def default_credentials_path() -> Path:
    """The shared credentials file, ``~/.aws/credentials`` unless overridden."""
    if configured := os.environ.get(CREDENTIALS_FILE_ENV_VAR):
        return Path(configured).expanduser()
    return Path.home() / ".aws" / "credentials"


class ProfileCredentialsSource:
    """Resolves AWS Credentials from a profile in the shared credentials file.

    The file is re-read on every call. A missing or unreadable file yields no
    credentials rather than an error, so the next source in a chain can be tried.
    """

    def __init__(
        self, profile: str = DEFAULT_PROFILE, path: str | os.PathLike[str] | None = None
    ):
        self.profile = profile
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else default_credentials_path()

    def __call__(self) -> AWSCredentials | None:
        path = self.path
        try:
            with path.open(encoding="utf-8") as credentials_file:
                section = reduce(
                    _ProfileSection.accept,
                    credentials_file,
                    _ProfileSection(name=self.profile),
                )
        except FileNotFoundError:
            logger.info("No AWS credentials file found at %s", path)
            return None
        except (OSError, UnicodeDecodeError) as err:
            logger.error("Unable to read AWS credentials file %s: %s", path, err)
            return None

        return build_credentials(
            section.access_key_id, section.secret_access_key, section.session_token
        )

    def __repr__(self) -> str:
        return f"ProfileCredentialsSource(profile={self.profile!r})"
