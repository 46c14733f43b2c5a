from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from dashlink.domain.requests import MutationHint, RequestDescriptor


def _hint() -> MutationHint:
    return MutationHint(resource="withdrawal", fields={"amount": 100.0})


def test_descriptor_normalises_method_and_freezes_headers() -> None:
    headers = {"X-Trace": "abc"}
    descriptor = RequestDescriptor(method=" post ", path="/items", headers=headers)
    headers["X-Trace"] = "changed"

    assert descriptor.method == "POST"
    assert descriptor.headers["X-Trace"] == "abc"
    with pytest.raises(TypeError):
        descriptor.headers["X-Other"] = "x"  # type: ignore[index]


def test_descriptor_rejects_relative_path() -> None:
    with pytest.raises(ValueError, match="must start with '/'"):
        RequestDescriptor(method="GET", path="users/me")


def test_read_requests_cannot_carry_hints() -> None:
    with pytest.raises(ValueError, match="cannot carry a mutation hint"):
        RequestDescriptor(method="GET", path="/items", hint=_hint())


def test_multipart_and_raw_body_are_exclusive() -> None:
    with pytest.raises(ValueError, match="Multipart"):
        RequestDescriptor(
            method="POST",
            path="/upload",
            body=b"{}",
            files={"file": ("a.txt", b"a", None)},
        )


def test_json_descriptor_encodes_payload() -> None:
    descriptor = RequestDescriptor.json("post", "/withdrawal-requests", {"amount": 5}, hint=_hint())

    assert json.loads(descriptor.body or b"") == {"amount": 5}
    assert descriptor.is_mutating
    assert not descriptor.is_multipart
    assert descriptor.hint == _hint()


def test_multipart_descriptor_is_post() -> None:
    descriptor = RequestDescriptor.multipart(
        "/upload", files={"file": ("a.png", b"\x89PNG", "image/png")}, form={"kind": "avatar"}
    )

    assert descriptor.method == "POST"
    assert descriptor.is_multipart
    assert descriptor.form == {"kind": "avatar"}


def test_with_path_keeps_everything_else() -> None:
    descriptor = RequestDescriptor.json("PUT", "/a", {"x": 1}, hint=_hint())

    moved = descriptor.with_path("/b")

    assert moved.path == "/b"
    assert moved.body == descriptor.body
    assert moved.hint == descriptor.hint


def test_hint_requires_fields_and_aware_time() -> None:
    with pytest.raises(ValueError, match="at least one"):
        MutationHint(resource="withdrawal", fields={})
    with pytest.raises(ValueError, match="timezone"):
        MutationHint(
            resource="withdrawal",
            fields={"amount": 1},
            submitted_at=datetime(2025, 1, 1),  # noqa: DTZ001
        )


def test_stamped_keeps_existing_submission_time() -> None:
    first = datetime(2025, 1, 1, tzinfo=UTC)
    later = datetime(2025, 1, 2, tzinfo=UTC)

    stamped = _hint().stamped(first)

    assert stamped.submitted_at == first
    assert stamped.stamped(later).submitted_at == first
