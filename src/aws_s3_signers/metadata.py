# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from collections import OrderedDict
from collections.abc import Iterable, Iterator

from ._http import Field, Fields

USER_METADATA_PREFIX = "x-amz-meta-"
_VALUE_DELIMITER = ","


class UserMetadata:
    """User-defined object metadata, sent as ``x-amz-meta-*`` headers.

    Names are case insensitive and stored lowercased. Adding a name that is already
    present appends the new value to the existing one, comma separated, which is how
    S3 itself combines repeated metadata headers.
    """

    def __init__(self, initial: Iterable[tuple[str, str]] | None = None):
        self._entries: OrderedDict[str, str] = OrderedDict()
        for name, value in initial or ():
            self.add(name, value)

    def add(self, name: str, value: str | None) -> "UserMetadata":
        normalized = name.lower()
        if normalized not in self._entries:
            self._entries[normalized] = value if value is not None else ""
            return self

        new_value = value.strip() if value is not None else ""
        if new_value:
            self._entries[normalized] = (
                f"{self._entries[normalized]}{_VALUE_DELIMITER}{new_value}"
            )
        return self

    def remove(self, name: str) -> "UserMetadata":
        """Remove the metadata called ``name``.

        :raises KeyError: If no such metadata is present.
        """
        del self._entries[name.lower()]
        return self

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._entries.get(name.lower(), default)

    def index(self, name: str) -> int:
        """Position of ``name`` in insertion order.

        :raises ValueError: If no such metadata is present.
        """
        try:
            return list(self._entries).index(name.lower())
        except ValueError:
            raise ValueError(f"{name!r} is not in the user metadata") from None

    def as_fields(self) -> Fields:
        """Build the ``x-amz-meta-*`` request fields for this metadata."""
        return Fields(
            Field(name=f"{USER_METADATA_PREFIX}{name}", values=[value])
            for name, value in self._entries.items()
        )

    def __getitem__(self, name: str) -> str:
        return self._entries[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[tuple[str, str]]:
        yield from self._entries.items()

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserMetadata):
            return False
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"UserMetadata({list(self._entries.items())!r})"
