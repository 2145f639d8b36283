# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import re
from enum import Enum
from typing import Final

from ._http import URI

DEFAULT_ENDPOINT: Final = URI(host="s3.amazonaws.com")
DEFAULT_REGION: Final = "us-east-1"

_REGION = r"(?P<region>[a-z]{2}(?:-gov)?-[a-z]+-\d+)"
_REGIONAL_HOST_PATTERNS: Final = (
    re.compile(rf"^(?:.+\.)?s3\.dualstack\.{_REGION}\.amazonaws\.com(?:\.cn)?$"),
    re.compile(rf"^(?:.+\.)?s3[.-]{_REGION}\.amazonaws\.com(?:\.cn)?$"),
)


class S3Endpoint(Enum):
    """The public S3 regional endpoints."""

    US_EAST_2 = ("us-east-2", "US East (Ohio)")
    US_EAST_1 = ("us-east-1", "US East (N. Virginia)")
    US_WEST_1 = ("us-west-1", "US West (N. California)")
    US_WEST_2 = ("us-west-2", "US West (Oregon)")
    AF_SOUTH_1 = ("af-south-1", "Africa (Cape Town)")
    AP_EAST_1 = ("ap-east-1", "Asia Pacific (Hong Kong)")
    AP_SOUTH_1 = ("ap-south-1", "Asia Pacific (Mumbai)")
    AP_NORTHEAST_3 = ("ap-northeast-3", "Asia Pacific (Osaka)")
    AP_NORTHEAST_2 = ("ap-northeast-2", "Asia Pacific (Seoul)")
    AP_SOUTHEAST_1 = ("ap-southeast-1", "Asia Pacific (Singapore)")
    AP_SOUTHEAST_2 = ("ap-southeast-2", "Asia Pacific (Sydney)")
    AP_NORTHEAST_1 = ("ap-northeast-1", "Asia Pacific (Tokyo)")
    CA_CENTRAL_1 = ("ca-central-1", "Canada (Central)")
    CN_NORTH_1 = ("cn-north-1", "China (Beijing)")
    CN_NORTHWEST_1 = ("cn-northwest-1", "China (Ningxia)")
    EU_CENTRAL_1 = ("eu-central-1", "Europe (Frankfurt)")
    EU_WEST_1 = ("eu-west-1", "Europe (Ireland)")
    EU_WEST_2 = ("eu-west-2", "Europe (London)")
    EU_SOUTH_1 = ("eu-south-1", "Europe (Milan)")
    EU_WEST_3 = ("eu-west-3", "Europe (Paris)")
    EU_NORTH_1 = ("eu-north-1", "Europe (Stockholm)")
    SA_EAST_1 = ("sa-east-1", "South America (São Paulo)")
    ME_SOUTH_1 = ("me-south-1", "Middle East (Bahrain)")
    US_GOV_EAST_1 = ("us-gov-east-1", "AWS GovCloud (US-East)")
    US_GOV_WEST_1 = ("us-gov-west-1", "AWS GovCloud (US-West)")

    def __init__(self, region: str, label: str):
        self.region = region
        self.label = label

    @property
    def host(self) -> str:
        if self.region.startswith("cn-"):
            return f"s3.{self.region}.amazonaws.com.cn"
        return f"s3.{self.region}.amazonaws.com"

    @property
    def uri(self) -> URI:
        return URI(host=self.host)

    @property
    def dual_stack(self) -> URI:
        suffix = ".cn" if self.region.startswith("cn-") else ""
        return URI(host=f"s3.dualstack.{self.region}.amazonaws.com{suffix}")

    @property
    def port(self) -> int:
        return 443

    @classmethod
    def from_region(cls, region: str) -> "S3Endpoint":
        """Look up an endpoint by its region code, e.g. ``eu-west-1``.

        :raises ValueError: If the region isn't a known S3 region.
        """
        for endpoint in cls:
            if endpoint.region == region:
                return endpoint
        raise ValueError(f"Unknown S3 region: {region!r}")

    def __str__(self) -> str:
        return self.uri.build()


def region_from_host(host: str) -> str | None:
    """Derive the signing region from an S3 host name.

    Virtual-hosted, path-style, legacy dash-style and dual stack hosts are recognized.
    Global and custom hosts (for example ``s3.amazonaws.com`` or a local test server)
    return ``None``.
    """
    host = host.lower().rstrip(".")
    for pattern in _REGIONAL_HOST_PATTERNS:
        if match := pattern.match(host):
            return match.group("region")
    return None
