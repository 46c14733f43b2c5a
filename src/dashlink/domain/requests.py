"""Immutable descriptions of the HTTP calls issued by the request layer."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

READ_METHODS: Final[frozenset[str]] = frozenset({"GET", "HEAD", "OPTIONS"})

type FilePart = tuple[str, bytes, str | None]


def _freeze[V](mapping: Mapping[str, V] | None) -> Mapping[str, V]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(slots=True, frozen=True, kw_only=True)
class MutationHint:
    """What a write is expected to leave behind, so it can be found again later.

    ``fields`` are compared against records returned by a collection read; the record
    creation time is read from ``timestamp_field``.
    """

    resource: str
    fields: Mapping[str, object]
    timestamp_field: str = "created_at"
    submitted_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError("Mutation hint must declare at least one comparison field")
        if self.submitted_at is not None and self.submitted_at.tzinfo is None:
            raise ValueError("Mutation hint submission time must include timezone information")
        object.__setattr__(self, "fields", _freeze(self.fields))

    def stamped(self, moment: datetime) -> MutationHint:
        """Return the hint with ``submitted_at`` set, unless the caller already set it."""

        if self.submitted_at is not None:
            return self
        return replace(self, submitted_at=moment)


@dataclass(slots=True, frozen=True, kw_only=True)
class RequestDescriptor:
    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    files: Mapping[str, FilePart] | None = None
    form: Mapping[str, str] | None = None
    hint: MutationHint | None = None

    def __post_init__(self) -> None:
        method = self.method.strip().upper()
        if not method:
            raise ValueError("Request method must not be blank")
        if not self.path.startswith("/"):
            raise ValueError(f"Request path must start with '/': {self.path!r}")
        if self.hint is not None and method in READ_METHODS:
            raise ValueError(f"{method} requests cannot carry a mutation hint")
        if self.files is not None and self.body is not None:
            raise ValueError("Multipart requests cannot also carry a raw body")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "headers", _freeze(self.headers))
        if self.files is not None:
            object.__setattr__(self, "files", _freeze(self.files))
        if self.form is not None:
            object.__setattr__(self, "form", _freeze(self.form))

    @property
    def is_multipart(self) -> bool:
        return self.files is not None

    @property
    def is_mutating(self) -> bool:
        return self.method not in READ_METHODS

    @classmethod
    def get(cls, path: str, *, headers: Mapping[str, str] | None = None) -> RequestDescriptor:
        return cls(method="GET", path=path, headers=headers or {})

    @classmethod
    def json(
        cls,
        method: str,
        path: str,
        payload: object,
        *,
        hint: MutationHint | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestDescriptor:
        body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return cls(method=method, path=path, headers=headers or {}, body=body, hint=hint)

    @classmethod
    def multipart(
        cls,
        path: str,
        *,
        files: Mapping[str, FilePart],
        form: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestDescriptor:
        return cls(method="POST", path=path, headers=headers or {}, files=files, form=form)

    def with_path(self, path: str) -> RequestDescriptor:
        return replace(self, path=path)


__all__ = ["READ_METHODS", "FilePart", "MutationHint", "RequestDescriptor"]
