# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from collections.abc import Mapping

from .._identity import AWSCredentials
from .static import build_credentials

ACCESS_KEY_ENV_VARS = ("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY")
SECRET_KEY_ENV_VARS = ("AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY")


class EnvironmentCredentialsSource:
    """Resolves AWS Credentials from system environment variables.

    ``AWS_ACCESS_KEY_ID`` and ``AWS_SECRET_ACCESS_KEY`` are read first, falling back
    to the older ``AWS_ACCESS_KEY`` and ``AWS_SECRET_KEY``. Session tokens aren't read
    from the environment.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ

    def __call__(self) -> AWSCredentials | None:
        environ = self._environ if self._environ is not None else os.environ
        return build_credentials(
            _first_set(environ, ACCESS_KEY_ENV_VARS),
            _first_set(environ, SECRET_KEY_ENV_VARS),
        )

    def __repr__(self) -> str:
        return "EnvironmentCredentialsSource()"


def _first_set(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        if value := environ.get(name, "").strip():
            return value
    return None
