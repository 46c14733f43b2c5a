"""Multipart file uploads."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from dashlink.domain.outcome import Failure
from dashlink.domain.requests import RequestDescriptor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from dashlink.domain.outcome import Outcome
    from dashlink.domain.ports.requests import RequestExecutorPort

log = getLogger(__name__)

MAX_ALTERNATE_PATHS: Final[int] = 2
_METHOD_NOT_ALLOWED: Final[int] = 405


def _is_method_not_allowed(outcome: Outcome[object]) -> bool:
    return isinstance(outcome, Failure) and outcome.status_code == _METHOD_NOT_ALLOWED


async def upload_file(
    executor: RequestExecutorPort,
    path: str,
    *,
    filename: str,
    content: bytes,
    content_type: str | None = None,
    fields: Mapping[str, str] | None = None,
    alternate_paths: Sequence[str] = (),
) -> Outcome[object]:
    """POST ``content`` as the ``file`` part of a multipart form.

    Some upload routes answer 405 on one spelling of the path and accept another;
    up to two ``alternate_paths`` are tried, in order, only after a 405.
    """

    descriptor = RequestDescriptor.multipart(
        path,
        files={"file": (filename, content, content_type)},
        form=fields,
    )
    outcome: Outcome[object] = await executor.execute(descriptor)

    for alternate in alternate_paths[:MAX_ALTERNATE_PATHS]:
        if not _is_method_not_allowed(outcome):
            break
        log.info("Upload to %s answered 405; trying %s", descriptor.path, alternate)
        descriptor = descriptor.with_path(alternate)
        outcome = await executor.execute(descriptor)

    return outcome


__all__ = ["MAX_ALTERNATE_PATHS", "upload_file"]
