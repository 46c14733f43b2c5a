"""Reaction to auth loss: invalidate the session and send the user to log in."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dashlink.domain.ports.session import Navigator, SessionStore

log = getLogger(__name__)


class SessionGuard:
    """Clears credentials on every 401 and schedules at most one login redirect.

    The redirect flag stays set until :meth:`reset` is called after a new login, so a
    burst of concurrent 401s produces a single navigation.
    """

    def __init__(
        self,
        session: SessionStore,
        *,
        navigator: Navigator | None = None,
        login_path: str = "/login",
        redirect_delay_seconds: float = 1.0,
    ) -> None:
        self._session = session
        self._navigator = navigator
        self._login_path = login_path
        self._redirect_delay = redirect_delay_seconds
        self._redirect_scheduled = False

    @property
    def redirect_scheduled(self) -> bool:
        return self._redirect_scheduled

    def invalidate(self) -> None:
        self._session.clear()

    def on_auth_expired(self) -> None:
        self.invalidate()
        self._schedule_redirect()

    def reset(self) -> None:
        self._redirect_scheduled = False

    def _schedule_redirect(self) -> None:
        if self._navigator is None or self._redirect_scheduled:
            return
        if self._login_path in self._navigator.current_path():
            return
        self._redirect_scheduled = True
        log.info("Session expired; redirecting to %s", self._login_path)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._navigator.navigate(self._login_path)
            return
        loop.call_later(self._redirect_delay, self._navigator.navigate, self._login_path)


__all__ = ["SessionGuard"]
