"""Session identity.

The engagement state manager is scoped to whoever is signed in. The
provider holds that identity and tells subscribers when it changes;
there is no process-wide session, every manager gets its provider
passed in.
"""

from typing import Awaitable, Callable, Optional

import logfire
from pydantic import BaseModel, ConfigDict

from ink.domain.value import UserId


class Session(BaseModel):
    """Authenticated identity of a signed-in user."""

    model_config = ConfigDict(frozen=True)

    user_id: UserId
    email: Optional[str] = None
    display_name: Optional[str] = None


SessionListener = Callable[[Optional[Session]], Awaitable[None]]


class SessionProvider:
    """Holds the current session and notifies listeners of transitions.

    Listeners are awaited in subscription order with the new session, or
    None after sign-out.
    """

    def __init__(self, session: Optional[Session] = None) -> None:
        self._current = session
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Optional[Session]:
        """Signed-in session, or None when anonymous."""
        return self._current

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, session: Session) -> None:
        """Switch to a signed-in session."""
        logfire.info("Session started", user_id=session.user_id)
        await self._transition(session)

    async def sign_out(self) -> None:
        """Switch to the anonymous state."""
        if self._current is None:
            return
        logfire.info("Session ended", user_id=self._current.user_id)
        await self._transition(None)

    async def _transition(self, session: Optional[Session]) -> None:
        self._current = session
        for listener in list(self._listeners):
            await listener(session)
