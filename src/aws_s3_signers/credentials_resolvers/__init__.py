# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from .chain import CredentialsResolverChain, resolve_credentials
from .environment import EnvironmentCredentialsSource
from .interfaces import CredentialsSource
from .profile import ProfileCredentialsSource
from .properties import PropertiesCredentialsSource
from .static import StaticCredentialsSource, build_credentials

__all__ = (
    "CredentialsResolverChain",
    "CredentialsSource",
    "EnvironmentCredentialsSource",
    "ProfileCredentialsSource",
    "PropertiesCredentialsSource",
    "StaticCredentialsSource",
    "build_credentials",
    "resolve_credentials",
)
