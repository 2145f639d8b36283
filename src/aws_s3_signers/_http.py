# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from collections import Counter, OrderedDict
from collections.abc import AsyncIterable, Iterable, Iterator
from copy import deepcopy
from dataclasses import dataclass
from functools import cached_property
from urllib.parse import urlsplit, urlunparse

from .interfaces import http as interfaces_http


class Field(interfaces_http.Field):
    """A name-value pair representing a single header of an S3 request or response.

    All field names are case insensitive and case-variance must be treated as
    equivalent. The supplied casing is preserved for transmission.
    """

    def __init__(
        self,
        *,
        name: str,
        values: Iterable[str] | None = None,
        kind: interfaces_http.FieldPosition = interfaces_http.FieldPosition.HEADER,
    ):
        self.name = name
        self.values: list[str] = list(values) if values is not None else []
        self.kind = kind

    def add(self, value: str) -> None:
        """Append a value to a field."""
        self.values.append(value)

    def as_string(self, delimiter: str = ",") -> str:
        """Get delimited string of all values.

        A field with a single value returns it unmodified. Values of multi-valued
        fields that contain commas or double quotes are quoted and escaped.
        """
        match len(self.values):
            case 0:
                return ""
            case 1:
                return self.values[0]
            case _:
                return delimiter.join(
                    quote_and_escape_field_value(val) for val in self.values
                )

    def as_tuples(self) -> list[tuple[str, str]]:
        """Get list of ``name``, ``value`` tuples, one per value."""
        return [(self.name, val) for val in self.values]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return (
            self.name == other.name
            and self.kind is other.kind
            and self.values == other.values
        )

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, value={self.values!r}, kind={self.kind!r})"


class Fields(interfaces_http.Fields):
    def __init__(
        self,
        initial: Iterable[interfaces_http.Field] | None = None,
        *,
        encoding: str = "utf-8",
    ):
        """Collection of header entries mapped by case-insensitive name.

        :param initial: Initial list of ``Field`` objects. Names must be unique.
        :param encoding: The string encoding used when fields are transmitted.
        """
        init_fields = list(initial) if initial is not None else []
        init_field_names = [self._normalize_field_name(fld.name) for fld in init_fields]
        repeated = [name for name, num in Counter(init_field_names).items() if num > 1]
        if repeated:
            raise ValueError(
                "Field names of the initial list of fields must be unique. The "
                "following normalized field names appear more than once: "
                f"{', '.join(repeated)}."
            )
        self.entries: OrderedDict[str, interfaces_http.Field] = OrderedDict(
            zip(init_field_names, init_fields)
        )
        self.encoding: str = encoding

    def set_field(self, field: interfaces_http.Field) -> None:
        """Set or replace the entry for ``field.name``."""
        self.__setitem__(field.name, field)

    def add(self, name: str, value: str) -> None:
        """Append ``value`` to the field called ``name``, creating it if needed."""
        if name in self:
            self[name].add(value)
        else:
            self.set_field(Field(name=name, values=[value]))

    def __setitem__(self, name: str, field: interfaces_http.Field) -> None:
        normalized_name = self._normalize_field_name(name)
        normalized_field_name = self._normalize_field_name(field.name)
        if normalized_name != normalized_field_name:
            raise ValueError(
                f"Supplied key {name} does not match Field.name "
                f"provided: {normalized_field_name}"
            )
        self.entries[normalized_name] = field

    def get(
        self, key: str, default: interfaces_http.Field | None = None
    ) -> interfaces_http.Field | None:
        return self[key] if key in self else default

    def __getitem__(self, name: str) -> interfaces_http.Field:
        return self.entries[self._normalize_field_name(name)]

    def __delitem__(self, name: str) -> None:
        del self.entries[self._normalize_field_name(name)]

    def get_by_type(
        self, kind: interfaces_http.FieldPosition
    ) -> list[interfaces_http.Field]:
        return [entry for entry in self.entries.values() if entry.kind is kind]

    def _normalize_field_name(self, name: str) -> str:
        return name.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fields):
            return False
        return self.encoding == other.encoding and self.entries == other.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        yield from self.entries.values()

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Fields({self.entries})"

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self._normalize_field_name(key) in self.entries


@dataclass(kw_only=True, frozen=True)
class URI(interfaces_http.URI):
    """Target location of an S3 request."""

    scheme: str = "https"
    """For example ``http`` or ``https``."""

    username: str | None = None
    password: str | None = None

    host: str
    """The hostname, for example ``s3.us-west-2.amazonaws.com``."""

    port: int | None = None
    """An explicit port number."""

    path: str | None = None
    """Path component of the URI, already percent-encoded."""

    query: str | None = None
    """Query component of the URI as string."""

    fragment: str | None = None

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{username}:{password}@{host}:{port}``

        ``username``, ``password``, and ``port`` are only included if set. ``password``
        is ignored, unless ``username`` is also set.
        """
        return self._netloc

    # cached_property allows setting, so it is kept behind a read-only property.
    @cached_property
    def _netloc(self) -> str:
        if self.username is not None:
            password = "" if self.password is None else f":{self.password}"
            userinfo = f"{self.username}{password}@"
        else:
            userinfo = ""

        port = "" if self.port is None else f":{self.port}"
        return f"{userinfo}{self.host}{port}"

    def build(self) -> str:
        """Construct the URI string.

        Returns a string of the form
        ``{scheme}://{username}:{password}@{host}:{port}{path}?{query}#{fragment}``
        """
        components = (
            self.scheme,
            self.netloc,
            self.path or "",
            "",  # params
            self.query,
            self.fragment,
        )
        return urlunparse(components)


def parse_uri(url: str) -> URI:
    """Parse an absolute URL string such as ``https://s3.amazonaws.com/bucket/key``.

    A bare host name (``s3.amazonaws.com``) is treated as an https host.

    :raises ValueError: If no host can be found in ``url``.
    """
    if "://" not in url:
        url = f"https://{url}"
    parts = urlsplit(url)
    if not parts.hostname:
        raise ValueError(f"Unable to find a host in {url!r}")
    return URI(
        scheme=parts.scheme,
        username=parts.username,
        password=parts.password,
        host=parts.hostname,
        port=parts.port,
        path=parts.path or None,
        query=parts.query or None,
        fragment=parts.fragment or None,
    )


class AWSRequest(interfaces_http.Request):
    def __init__(
        self,
        *,
        destination: URI,
        method: str,
        body: AsyncIterable[bytes] | Iterable[bytes] | None,
        fields: Fields,
    ):
        self.destination = destination
        self.method = method
        self.body = body
        self.fields = fields

    def __deepcopy__(self, memo: dict[int, AWSRequest] | None = None) -> AWSRequest:
        if memo is None:
            memo = {}

        if id(self) in memo:
            return memo[id(self)]

        # The destination is immutable and the body may be a one-shot stream, so
        # only the fields are copied.
        new_instance = self.__class__(
            destination=self.destination,
            body=self.body,
            method=self.method,
            fields=deepcopy(self.fields, memo),
        )
        memo[id(self)] = new_instance
        return new_instance


def quote_and_escape_field_value(value: str) -> str:
    """Escapes and quotes a single :class:`Field` value if necessary.

    See :func:`Field.as_string` for quoting and escaping logic.
    """
    chars_to_quote = (",", '"')
    if any(char in chars_to_quote for char in value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    else:
        return value
