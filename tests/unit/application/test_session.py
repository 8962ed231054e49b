"""Unit tests for SessionProvider."""

from typing import Optional

import pytest

from ink.application.session import Session, SessionProvider
from ink.domain.value import UserId


class TestSessionProvider:
    """Tests for session transitions and listeners."""

    @pytest.mark.asyncio
    async def test_listeners_are_notified_in_order(self):
        """Every transition should reach each listener, in subscription order."""
        # Arrange
        provider = SessionProvider()
        seen: list[tuple[str, Optional[str]]] = []

        async def first(session: Optional[Session]) -> None:
            seen.append(("first", session.user_id if session else None))

        async def second(session: Optional[Session]) -> None:
            seen.append(("second", session.user_id if session else None))

        provider.subscribe(first)
        provider.subscribe(second)

        # Act
        await provider.sign_in(Session(user_id=UserId("u-1")))
        await provider.sign_out()

        # Assert
        assert seen == [
            ("first", "u-1"),
            ("second", "u-1"),
            ("first", None),
            ("second", None),
        ]
        assert provider.current is None

    @pytest.mark.asyncio
    async def test_unsubscribed_listener_is_not_called(self):
        provider = SessionProvider()
        calls = []

        async def listener(session: Optional[Session]) -> None:
            calls.append(session)

        unsubscribe = provider.subscribe(listener)
        unsubscribe()
        unsubscribe()  # Second call is harmless
        await provider.sign_in(Session(user_id=UserId("u-1")))

        assert calls == []
        assert provider.current.user_id == "u-1"

    @pytest.mark.asyncio
    async def test_sign_out_when_anonymous_does_not_notify(self):
        provider = SessionProvider()
        calls = []

        async def listener(session: Optional[Session]) -> None:
            calls.append(session)

        provider.subscribe(listener)
        await provider.sign_out()

        assert calls == []
