# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Request signing for Amazon S3.

Resolve credentials, build a version 2 or version 4 signature bound to them, and
compute the ``Authorization`` header for each request.
"""

from ._http import URI, AWSRequest, Field, Fields, parse_uri
from ._identity import AWSCredentials
from ._io import AsyncBytesReader, AsyncFileReader
from .credentials_resolvers import CredentialsResolverChain, resolve_credentials
from .endpoints import DEFAULT_ENDPOINT, S3Endpoint, region_from_host
from .factory import SignatureFactory, build_signature
from .metadata import UserMetadata
from .signatures import AWSV2Signature, AWSV4Signature, Signature, SignatureVersion
from .signers import SigV4Signer, SigV4SigningProperties

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "DEFAULT_ENDPOINT",
    "URI",
    "AWSCredentials",
    "AWSRequest",
    "AWSV2Signature",
    "AWSV4Signature",
    "AsyncBytesReader",
    "AsyncFileReader",
    "CredentialsResolverChain",
    "Field",
    "Fields",
    "S3Endpoint",
    "SigV4Signer",
    "SigV4SigningProperties",
    "Signature",
    "SignatureFactory",
    "SignatureVersion",
    "UserMetadata",
    "build_signature",
    "parse_uri",
    "region_from_host",
    "resolve_credentials",
)
