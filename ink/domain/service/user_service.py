"""User domain service."""

import random
import re
import time
from typing import Callable, Optional

import logfire

from ink.config import EngagementSettings
from ink.domain.error import (
    ConflictError,
    HandleAllocationExhaustedError,
    NotFoundError,
    ValidationError,
)
from ink.domain.model import HandleReservation, User
from ink.domain.repository import Collection, DocumentStore, Transaction
from ink.domain.value import Handle, UserId

from .base import Service


class UserService(Service):
    """Domain service for user profiles and handles."""

    def __init__(
        self,
        store: DocumentStore,
        engagement_settings: EngagementSettings,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize user service.

        Args:
            store: Document store
            engagement_settings: Engagement settings
            rng: Random source for handle suffixes
            clock: Wall clock in seconds, used by the fallback handle suffix
        """
        super().__init__(store)
        self.engagement_settings = engagement_settings
        self._rng = rng or random.Random()
        self._clock = clock

    @staticmethod
    def base_handle(display_name: Optional[str], email: Optional[str]) -> str:
        """Derive the preferred handle name from identity details.

        Uses the display name, then the email local part, then 'user'.
        Only letters, digits and underscores survive, lowercased.
        """
        for source in (display_name, email.split("@")[0] if email else None):
            if source:
                base = re.sub(r"[^a-zA-Z0-9_]", "", source).lower()[:30]
                if base:
                    return base
        return "user"

    async def allocate_handle(self, base: str) -> Handle:
        """Find a handle nobody has reserved yet.

        Tries ``base`` first, then ``base`` with a random 3-digit suffix. If
        every proposal is taken, falls back to a millisecond timestamp suffix
        instead of failing.

        Args:
            base: Preferred handle name, without '@'

        Returns:
            Available handle (not yet reserved)
        """
        with logfire.span("user_service.allocate_handle", base=base):
            try:
                return await self._find_unique_handle(base)
            except HandleAllocationExhaustedError as e:
                logfire.warn(
                    "Handle allocation exhausted, using timestamp suffix",
                    base=base,
                    attempts=e.attempts,
                )
                return Handle.from_name(f"{base}{int(self._clock() * 1000)}")

    async def _find_unique_handle(self, base: str) -> Handle:
        attempts = self.engagement_settings.handle_max_attempts
        candidate = base
        for _ in range(attempts):
            if await self.store.get(Collection.HANDLES, candidate) is None:
                return Handle.from_name(candidate)
            candidate = f"{base}{self._rng.randint(100, 999)}"
        raise HandleAllocationExhaustedError(base, attempts)

    async def provision_profile(
        self,
        user_id: UserId,
        email: Optional[str],
        display_name: Optional[str],
    ) -> tuple[User, bool]:
        """Return the user's profile, creating it on first sign-in.

        Profile and handle reservation are created in one transaction. If
        the allocated handle is claimed by someone else before the commit,
        a new handle is allocated.

        Args:
            user_id: User ID from the identity provider
            email: User email
            display_name: Display name from the identity provider

        Returns:
            Tuple of (profile, whether it was created now)

        Raises:
            ConflictError: If no handle could be reserved
        """
        with logfire.span("user_service.provision_profile", user_id=user_id):
            existing = await self.store.get(Collection.USERS, user_id)
            if existing is not None:
                return User.from_document(existing.id, existing.data), False

            base = self.base_handle(display_name, email)
            for _ in range(self.engagement_settings.handle_max_attempts):
                handle = await self.allocate_handle(base)

                async def create(txn: Transaction) -> tuple[User, bool]:
                    current = await txn.get(Collection.USERS, user_id)
                    if current is not None:
                        # Another session of the same account got there first
                        return User.from_document(current.id, current.data), False
                    if await txn.get(Collection.HANDLES, handle.name) is not None:
                        raise ConflictError(f"Handle {handle} was just taken")

                    profile = User(
                        id=user_id,
                        handle=handle,
                        email=email,
                        display_name=display_name,
                    )
                    txn.set(Collection.USERS, user_id, profile.to_document())
                    txn.set(
                        Collection.HANDLES,
                        handle.name,
                        HandleReservation(user_id=user_id).to_document(),
                    )
                    return profile, True

                try:
                    profile, created = await self.store.transaction(create)
                except ConflictError as e:
                    logfire.warn("Handle reservation raced", handle=str(handle), error=str(e))
                    continue

                if created:
                    logfire.info("Profile created", user_id=user_id, handle=str(handle))
                return profile, created

            raise ConflictError(f"Could not reserve a handle for user {user_id}")

    async def get_profile(self, user_id: UserId) -> User:
        """Get a user's profile.

        Raises:
            NotFoundError: If the user has no profile
        """
        with logfire.span("user_service.get_profile", user_id=user_id):
            snapshot = await self.store.get(Collection.USERS, user_id)
            if snapshot is None:
                logfire.warn("User not found", user_id=user_id)
                raise NotFoundError("User", user_id)
            return User.from_document(snapshot.id, snapshot.data)

    async def get_profile_by_handle(self, handle: Handle) -> Optional[User]:
        """Resolve a handle to its owner's profile.

        Returns:
            User if the handle is reserved and the profile exists, None otherwise
        """
        with logfire.span("user_service.get_profile_by_handle", handle=str(handle)):
            reservation = await self.store.get(Collection.HANDLES, handle.name)
            if reservation is None:
                logfire.info("Handle not reserved", handle=str(handle))
                return None
            owner = HandleReservation.from_document(reservation.id, reservation.data)
            snapshot = await self.store.get(Collection.USERS, owner.user_id)
            if snapshot is None:
                return None
            return User.from_document(snapshot.id, snapshot.data)

    async def leaderboard(self, limit: Optional[int] = None) -> list[User]:
        """Top users by point balance, highest first."""
        limit = limit or self.engagement_settings.leaderboard_limit
        with logfire.span("user_service.leaderboard", limit=limit):
            snapshots = await self.store.query(
                Collection.USERS, order_by="points", descending=True, limit=limit
            )
            return [User.from_document(s.id, s.data) for s in snapshots]

    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str] = None,
        public_name: Optional[bool] = None,
    ) -> User:
        """Change display settings of a profile.

        Raises:
            NotFoundError: If the user has no profile
        """
        with logfire.span("user_service.update_profile", user_id=user_id):
            fields: dict[str, object] = {}
            if display_name is not None:
                fields["display_name"] = display_name
            if public_name is not None:
                fields["public_name"] = public_name
            if fields:
                await self.store.update(Collection.USERS, user_id, fields)
            return await self.get_profile(user_id)

    async def rename_handle(self, user_id: UserId, name: str) -> User:
        """Move a user to a new handle, releasing the old one.

        Args:
            user_id: User ID
            name: New handle, with or without '@'

        Returns:
            Updated profile

        Raises:
            ValidationError: If the handle is malformed or taken
            NotFoundError: If the user has no profile
        """
        name = name.lstrip("@")
        if not re.match(r"^[a-zA-Z0-9_]{3,20}$", name):
            raise ValidationError(
                "Handle must be 3-20 characters of letters, numbers and underscores"
            )
        new_handle = Handle.from_name(name)

        async def rename(txn: Transaction) -> User:
            snapshot = await txn.get(Collection.USERS, user_id)
            if snapshot is None:
                raise NotFoundError("User", user_id)
            profile = User.from_document(snapshot.id, snapshot.data)
            if profile.handle == new_handle:
                return profile

            reservation = await txn.get(Collection.HANDLES, new_handle.name)
            if reservation is not None and reservation.data.get("user_id") != user_id:
                raise ValidationError(f"Handle {new_handle} is already taken")

            txn.set(
                Collection.HANDLES,
                new_handle.name,
                HandleReservation(user_id=user_id).to_document(),
            )
            txn.delete(Collection.HANDLES, profile.handle.name)
            txn.update(Collection.USERS, user_id, {"handle": new_handle.root})
            return profile.model_copy(update={"handle": new_handle})

        with logfire.span(
            "user_service.rename_handle", user_id=user_id, handle=str(new_handle)
        ):
            profile = await self.store.transaction(rename)
            logfire.info("Handle changed", user_id=user_id, handle=str(profile.handle))
            return profile
