# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import OrderedDict
from collections.abc import AsyncIterable, Iterable, Iterator
from enum import Enum
from typing import Protocol, runtime_checkable


class FieldPosition(Enum):
    """Where a field is placed in an HTTP message."""

    HEADER = 0
    """Header field, as defined in RFC 9110 Section 6.3."""

    TRAILER = 1
    """Trailer field, as defined in RFC 9110 Section 6.5.

    S3 signing never reads trailers, but transports must not send them as headers.
    """


class Field(Protocol):
    """A named, possibly multi-valued, piece of request metadata.

    Field names are case insensitive. Implementations may normalize names for lookup
    but should preserve the supplied casing for transmission.
    """

    name: str
    values: list[str]
    kind: FieldPosition = FieldPosition.HEADER

    def add(self, value: str) -> None:
        """Append a value to the field."""
        ...

    def as_string(self, delimiter: str = ",") -> str:
        """Serialize the values into a single line string."""
        ...

    def as_tuples(self) -> list[tuple[str, str]]:
        """Get one ``(name, value)`` tuple per value."""
        ...


class Fields(Protocol):
    """Ordered, case-insensitive multimap of request or response fields.

    This is the mutable header collection that signatures read from and write their
    auxiliary headers (date, content hash, security token) into.
    """

    entries: OrderedDict[str, Field]
    encoding: str = "utf-8"

    def set_field(self, field: Field) -> None:
        """Set or replace the entry for ``field.name``."""
        ...

    def get(self, key: str, default: Field | None = None) -> Field | None:
        """Retrieve a Field entry, or ``default`` if it isn't present."""
        ...

    def __getitem__(self, name: str) -> Field: ...

    def __delitem__(self, name: str) -> None: ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...

    def get_by_type(self, kind: FieldPosition) -> list[Field]:
        """Retrieve all fields of the given position, e.g. all headers."""
        ...


@runtime_checkable
class URI(Protocol):
    """Target location of a request."""

    scheme: str
    username: str | None
    password: str | None
    host: str
    port: int | None
    path: str | None
    query: str | None
    fragment: str | None

    def build(self) -> str:
        """Construct the URI string representation."""
        ...

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{username}:{password}@{host}:{port}``"""
        ...


class Request(Protocol):
    """Protocol-agnostic representation of a request to be signed or sent."""

    destination: URI
    method: str
    fields: Fields
    body: AsyncIterable[bytes] | Iterable[bytes] | None
