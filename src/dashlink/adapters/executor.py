"""Issue one HTTP call and turn whatever happens into a typed ``Outcome``.

The executor never raises for transport conditions and never retries. Ambiguity
(a body cut off mid-stream) is reported as ``Ambiguous`` for hinted writes so the
caller can reconcile instead of guessing.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol, cast

import httpx

from dashlink.adapters.auth import SessionGuard
from dashlink.adapters.http_resilience import ResilientClient, build_limiter
from dashlink.config.errors import ConfigurationError
from dashlink.config.http_resilience import DEFAULT_HEADERS
from dashlink.domain.errors import (
    FORBIDDEN_MESSAGE,
    INCOMPLETE_RESPONSE_MESSAGE,
    MALFORMED_PAYLOAD_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    ErrorKind,
    extract_error_message,
    generic_http_message,
    is_success_status,
    kind_for_status,
)
from dashlink.domain.integrity import (
    Malformed,
    PlainTextSuccess,
    Truncated,
    WellFormedJson,
    inspect_body,
)
from dashlink.domain.outcome import Ambiguous, Failure, Outcome, Success
from dashlink.domain.time_windows import utcnow

if TYPE_CHECKING:
    from aiolimiter import AsyncLimiter

    from dashlink.config.api import ApiConfig
    from dashlink.config.http_resilience import ResilienceConfig
    from dashlink.domain.ports.requests import Decoder
    from dashlink.domain.ports.session import Navigator, SessionStore
    from dashlink.domain.requests import MutationHint, RequestDescriptor
    from dashlink.domain.time_windows import Clock

log = getLogger(__name__)

# Lower-cased fragments seen in transport errors when a body stops mid-stream.
_CUTOFF_MARKERS: Final[tuple[str, ...]] = (
    "err_incomplete_chunked_encoding",
    "incomplete chunked",
    "without sending complete message body",
    "incomplete",
    "chunked",
)
_PROTOCOL_MARKERS: Final[tuple[str, ...]] = (
    "http2_protocol_error",
    "protocol_error",
    "protocol error",
)
_NOT_FOUND_MESSAGE_MARKERS: Final[tuple[str, ...]] = ("no daily reports found",)


class ClientFactory(Protocol):
    def __call__(
        self,
        config: ResilienceConfig,
        *,
        limiter: AsyncLimiter | None = None,
    ) -> ResilientClient: ...


def classify_transport_error(exc: BaseException) -> ErrorKind:
    """Classify a transport exception by its message, then by its type."""

    message = str(exc).lower()
    if any(marker in message for marker in _CUTOFF_MARKERS):
        return ErrorKind.INCOMPLETE_RESPONSE
    if isinstance(exc, httpx.ProtocolError) or any(
        marker in message for marker in _PROTOCOL_MARKERS
    ):
        return ErrorKind.PROTOCOL_ERROR
    return ErrorKind.TRANSPORT


class RequestExecutor:
    def __init__(
        self,
        config: ApiConfig,
        session: SessionStore,
        *,
        navigator: Navigator | None = None,
        client_factory: ClientFactory | None = None,
        clock: Clock = utcnow,
    ) -> None:
        if config.resilience.base_url is None:
            raise ConfigurationError("Missing base_url in API resilience configuration")
        self._config = config
        self._resilience = config.resilience
        self._session = session
        self._guard = SessionGuard(
            session,
            navigator=navigator,
            login_path=config.login_path,
            redirect_delay_seconds=config.redirect_delay_seconds,
        )
        self._client_factory: ClientFactory = client_factory or ResilientClient
        # one budget for every request this executor sends
        self._limiter = build_limiter(config.resilience.ratelimit)
        self._clock = clock

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def guard(self) -> SessionGuard:
        return self._guard

    @property
    def limiter(self) -> AsyncLimiter | None:
        return self._limiter

    def logout(self) -> None:
        self._guard.invalidate()

    async def execute[T](
        self,
        descriptor: RequestDescriptor,
        *,
        decode: Decoder[T] | None = None,
    ) -> Outcome[T]:
        hint = descriptor.hint.stamped(self._clock()) if descriptor.hint is not None else None
        headers = self._build_headers(descriptor)

        async with self._client_factory(self._resilience, limiter=self._limiter) as client:
            request = client.build_request(
                descriptor.method,
                descriptor.path,
                headers=headers,
                content=descriptor.body,
                data=dict(descriptor.form) if descriptor.form is not None else None,
                files=dict(descriptor.files) if descriptor.files is not None else None,
            )
            log.debug("%s %s", descriptor.method, descriptor.path)

            try:
                response = await client.send(request)
            except (httpx.HTTPError, OSError) as exc:
                return self._transport_failure(descriptor, hint, exc)

            try:
                await response.aread()
            except (httpx.HTTPError, OSError) as exc:
                return self._transport_failure(descriptor, hint, exc)
            finally:
                await response.aclose()

        return self._interpret(descriptor, hint, response.status_code, response.text, decode)

    def _build_headers(self, descriptor: RequestDescriptor) -> httpx.Headers:
        headers = httpx.Headers()
        if not descriptor.is_multipart:
            headers.update(self._resilience.default_headers or DEFAULT_HEADERS)
        for name, value in descriptor.headers.items():
            headers[name] = value
        if descriptor.is_multipart and "content-type" in headers:
            # the transport must write its own multipart boundary
            del headers["content-type"]

        token = self._session.get()
        if token is not None and token.strip():
            headers["Authorization"] = f"Bearer {token.strip()}"
        return headers

    def _interpret[T](
        self,
        descriptor: RequestDescriptor,
        hint: MutationHint | None,
        status: int,
        text: str,
        decode: Decoder[T] | None,
    ) -> Outcome[T]:
        integrity = inspect_body(status, text)

        if isinstance(integrity, Truncated):
            return self._incomplete(descriptor, hint, raw_body=text, cause="truncated body")
        if isinstance(integrity, PlainTextSuccess):
            return Success(data=cast(T, {"message": integrity.text}))
        if isinstance(integrity, Malformed):
            log.warning("Unreadable %s body from %s %s", status, descriptor.method, descriptor.path)
            return Failure(
                kind=ErrorKind.MALFORMED_PAYLOAD,
                message=MALFORMED_PAYLOAD_MESSAGE,
                details=integrity.text,
                status_code=status,
            )

        data = integrity.value if isinstance(integrity, WellFormedJson) else None
        if not is_success_status(status):
            return self._http_failure(descriptor, status, data, text)
        return self._decode(descriptor, status, data, decode)

    def _decode[T](
        self,
        descriptor: RequestDescriptor,
        status: int,
        data: object,
        decode: Decoder[T] | None,
    ) -> Outcome[T]:
        if decode is None or data is None:
            return Success(data=cast(T, data))
        try:
            return Success(data=decode(data))
        except (ValueError, TypeError) as exc:
            log.warning(
                "Payload from %s %s failed to decode: %s", descriptor.method, descriptor.path, exc
            )
            if descriptor.hint is not None:
                # the server accepted the write; an odd answer shape must not read as rejection
                return Success(data=cast(T, data))
            return Failure(
                kind=ErrorKind.MALFORMED_PAYLOAD,
                message=MALFORMED_PAYLOAD_MESSAGE,
                details=str(exc),
                status_code=status,
            )

    def _http_failure(
        self,
        descriptor: RequestDescriptor,
        status: int,
        data: object,
        text: str,
    ) -> Failure:
        kind = kind_for_status(status)
        message = extract_error_message(data, text, status)
        generic = message == generic_http_message(status)

        if kind is ErrorKind.AUTH_EXPIRED:
            self._guard.on_auth_expired()
            message = UNAUTHORIZED_MESSAGE
        elif kind is ErrorKind.FORBIDDEN and generic:
            message = FORBIDDEN_MESSAGE
        elif kind is ErrorKind.NOT_FOUND and generic:
            message = NOT_FOUND_MESSAGE

        if self._is_anomaly(descriptor, kind, message):
            log.error(
                "API error %s %s: status=%s, error=%s",
                descriptor.method,
                descriptor.path,
                status,
                message,
            )

        details = data if data is not None else (text or None)
        return Failure(kind=kind, message=message, details=details, status_code=status)

    def _is_anomaly(self, descriptor: RequestDescriptor, kind: ErrorKind, message: str) -> bool:
        lowered_message = message.lower()
        if kind is ErrorKind.AUTH_EXPIRED:
            return False
        if kind is ErrorKind.NOT_FOUND:
            path = descriptor.path.lower()
            if any(expected.lower() in path for expected in self._config.expected_not_found_paths):
                return False
            if any(marker in lowered_message for marker in _NOT_FOUND_MESSAGE_MARKERS):
                return False
        return not (kind is ErrorKind.SERVER_ERROR and "unauthorized" in lowered_message)

    def _transport_failure(
        self,
        descriptor: RequestDescriptor,
        hint: MutationHint | None,
        exc: BaseException,
    ) -> Failure | Ambiguous:
        kind = classify_transport_error(exc)
        if kind is ErrorKind.INCOMPLETE_RESPONSE:
            return self._incomplete(descriptor, hint, raw_body=None, cause=str(exc))

        log.warning(
            "%s %s failed before a response (%s): %s",
            descriptor.method,
            descriptor.path,
            kind,
            exc,
        )
        return Failure(kind=kind, message=str(exc) or NETWORK_ERROR_MESSAGE)

    def _incomplete(
        self,
        descriptor: RequestDescriptor,
        hint: MutationHint | None,
        *,
        raw_body: str | None,
        cause: str,
    ) -> Failure | Ambiguous:
        if hint is not None:
            log.warning(
                "%s %s ended ambiguously (%s); %s write needs reconciliation",
                descriptor.method,
                descriptor.path,
                cause,
                hint.resource,
            )
            return Ambiguous(hint=hint, raw_body=raw_body)

        log.warning(
            "%s %s returned an incomplete response (%s)", descriptor.method, descriptor.path, cause
        )
        return Failure(
            kind=ErrorKind.INCOMPLETE_RESPONSE,
            message=INCOMPLETE_RESPONSE_MESSAGE,
            details=raw_body if raw_body is not None else cause,
        )


__all__ = ["ClientFactory", "RequestExecutor", "classify_transport_error"]
