# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from collections.abc import Mapping

from .._identity import AWSCredentials
from ..config import SYSTEM_PROPERTIES
from .static import build_credentials

ACCESS_KEY_PROPERTY = "aws.accessKeyId"
SECRET_KEY_PROPERTY = "aws.secretKey"


class PropertiesCredentialsSource:
    """Resolves AWS Credentials from process-wide properties.

    By default the shared :data:`aws_s3_signers.config.SYSTEM_PROPERTIES` mapping is
    read, so an application can install keys once at startup::

        SYSTEM_PROPERTIES["aws.accessKeyId"] = "AKIDEXAMPLE"
        SYSTEM_PROPERTIES["aws.secretKey"] = "..."
    """

    def __init__(self, properties: Mapping[str, str] | None = None):
        self._properties = properties

    def __call__(self) -> AWSCredentials | None:
        properties = (
            self._properties if self._properties is not None else SYSTEM_PROPERTIES
        )
        return build_credentials(
            properties.get(ACCESS_KEY_PROPERTY), properties.get(SECRET_KEY_PROPERTY)
        )

    def __repr__(self) -> str:
        return "PropertiesCredentialsSource()"
