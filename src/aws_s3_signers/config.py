# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Literal

from ._http import URI, parse_uri
from ._identity import AWSCredentials
from .exceptions import ConfigurationError
from .signatures import DEFAULT_DIGEST_TIMEOUT, SignatureVersion

SOURCE_CONSTRUCTOR = "constructor"
SOURCE_ENVIRONMENT = "environment"
SOURCE_DEFAULT = "default"
SOURCE_IN_CODE_UPDATE = "in_code_update"

SourceType = Literal["constructor", "environment", "default", "in_code_update"]

SYSTEM_PROPERTIES: dict[str, str] = {}
"""Process-wide properties, read by
:class:`~aws_s3_signers.credentials_resolvers.PropertiesCredentialsSource`."""


class ConfigValue:
    """Configuration value with metadata about its source"""

    def __init__(self, value: Any, source: SourceType):
        self.value = value
        self.source = source

    def __repr__(self) -> str:
        return f"ConfigValue(value={self.value!r}, source={self.source!r})"


class S3ClientConfig:
    """S3 client configuration with precedence-based resolution.

    Each field is taken from the constructor when given, then from the environment,
    then from its default. The constructor's sentinel default (``...``) tells "not
    provided" apart from "explicitly set to None".

    Fields are declared in ``CONFIG_FIELDS``. ``env_var`` may name several variables,
    checked in order. A ``validator`` method may normalize the value it is given.
    """

    CONFIG_FIELDS: ClassVar[dict[str, dict[str, Any]]] = {
        "endpoint_uri": {
            "env_var": ("AWS_ENDPOINT_URL",),
            "default": None,
            "validator": "_validate_endpoint_uri",
        },
        "region": {
            "env_var": ("AWS_REGION", "AWS_DEFAULT_REGION"),
            "default": None,
            "type": str | None,
        },
        "profile": {
            "env_var": ("AWS_PROFILE",),
            "default": None,
            "type": str | None,
        },
        "signature_version": {
            "default": SignatureVersion.V4,
            "validator": "_validate_signature_version",
        },
        "digest_timeout": {
            "default": DEFAULT_DIGEST_TIMEOUT,
            "validator": "_validate_digest_timeout",
        },
        "credentials": {
            "default": None,
            "type": AWSCredentials | None,
        },
    }

    def __init__(
        self,
        *,
        endpoint_uri: str | URI | None = ...,  # type: ignore[assignment]
        region: str | None = ...,  # type: ignore[assignment]
        profile: str | None = ...,  # type: ignore[assignment]
        signature_version: SignatureVersion | str = ...,  # type: ignore[assignment]
        digest_timeout: float = ...,  # type: ignore[assignment]
        credentials: AWSCredentials | None = ...,  # type: ignore[assignment]
    ):
        self._constructor_values = {
            k: v for k, v in locals().items() if k != "self" and v is not ...
        }
        self._resolved = False

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def resolve(
        self, *, environment_loader: Callable[[], Mapping[str, str]] | None = None
    ) -> None:
        """Resolve every field from the constructor, the environment and defaults.

        :param environment_loader: Returns the environment to read, ``os.environ``
            by default.
        :raises RuntimeError: If the config was already resolved.
        :raises ConfigurationError: If a value fails validation.
        """
        if self._resolved:
            raise RuntimeError(
                "Config has already been resolved. Multiple calls to resolve() are "
                "not allowed."
            )

        env_values = (environment_loader or self._load_environment_values)()
        for field_name, field_info in self.CONFIG_FIELDS.items():
            resolved_value = self._resolve_field(
                field_name, env_values, field_info["default"]
            )
            setattr(self, f"_{field_name}", resolved_value)

        self._resolved = True

    def _load_environment_values(self) -> Mapping[str, str]:
        return os.environ

    def _resolve_field(
        self, field_name: str, env_values: Mapping[str, str], default_value: Any
    ) -> ConfigValue:
        field_config = self.CONFIG_FIELDS[field_name]
        env_vars: tuple[str, ...] = field_config.get("env_var", ())
        from_env = [name for name in env_vars if env_values.get(name)]

        if field_name in self._constructor_values:
            value = self._constructor_values[field_name]
            source = SOURCE_CONSTRUCTOR
        elif from_env:
            value = env_values[from_env[0]]
            source = SOURCE_ENVIRONMENT
        else:
            value = default_value
            source = SOURCE_DEFAULT

        if validator := field_config.get("validator"):
            value = getattr(self, validator)(value, field_name)
        elif not isinstance(value, field_config["type"]):
            raise ConfigurationError(
                f"{field_name} must be {field_config['type']}, got "
                f"{type(value).__name__}"
            )

        return ConfigValue(value, source)

    def _validate_endpoint_uri(self, value: Any, field_name: str) -> URI | None:
        if value is None or isinstance(value, URI):
            return value
        if isinstance(value, str):
            try:
                return parse_uri(value)
            except ValueError as err:
                raise ConfigurationError(f"{field_name}: {err}") from err
        raise ConfigurationError(f"{field_name} must be a string or URI")

    def _validate_signature_version(
        self, value: Any, field_name: str
    ) -> SignatureVersion:
        if isinstance(value, SignatureVersion):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper().removeprefix("V")
            for version in SignatureVersion:
                if version.value == normalized:
                    return version
        raise ConfigurationError(
            f"{field_name} must be one of {[v.name for v in SignatureVersion]}, "
            f"got {value!r}"
        )

    def _validate_digest_timeout(self, value: Any, field_name: str) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
            raise ConfigurationError(
                f"{field_name} must be a positive number of seconds, got {value!r}"
            )
        return float(value)

    def get_config_value_object(self, field_name: str) -> ConfigValue:
        """Get the raw ConfigValue object for a field"""
        if not self._resolved:
            raise RuntimeError("Config must be resolved before accessing values")
        return getattr(self, f"_{field_name}")

    @property
    def endpoint_uri(self) -> URI | None:
        return self.get_config_value_object("endpoint_uri").value

    @endpoint_uri.setter
    def endpoint_uri(self, value: str | URI | None) -> None:
        self._endpoint_uri = ConfigValue(
            self._validate_endpoint_uri(value, "endpoint_uri"), SOURCE_IN_CODE_UPDATE
        )

    @property
    def region(self) -> str | None:
        return self.get_config_value_object("region").value

    @region.setter
    def region(self, value: str | None) -> None:
        self._region = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def profile(self) -> str | None:
        return self.get_config_value_object("profile").value

    @profile.setter
    def profile(self, value: str | None) -> None:
        self._profile = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def signature_version(self) -> SignatureVersion:
        return self.get_config_value_object("signature_version").value

    @signature_version.setter
    def signature_version(self, value: SignatureVersion | str) -> None:
        self._signature_version = ConfigValue(
            self._validate_signature_version(value, "signature_version"),
            SOURCE_IN_CODE_UPDATE,
        )

    @property
    def digest_timeout(self) -> float:
        return self.get_config_value_object("digest_timeout").value

    @digest_timeout.setter
    def digest_timeout(self, value: float) -> None:
        self._digest_timeout = ConfigValue(
            self._validate_digest_timeout(value, "digest_timeout"),
            SOURCE_IN_CODE_UPDATE,
        )

    @property
    def credentials(self) -> AWSCredentials | None:
        return self.get_config_value_object("credentials").value

    @credentials.setter
    def credentials(self, value: AWSCredentials | None) -> None:
        self._credentials = ConfigValue(value, SOURCE_IN_CODE_UPDATE)
