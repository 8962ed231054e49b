"""Unit tests for UserService."""

import asyncio
import random
import re

import pytest

from ink.config import EngagementSettings
from ink.domain.error import NotFoundError, ValidationError
from ink.domain.repository import Collection, DocumentStore
from ink.domain.service import UserService
from ink.domain.value import Handle, UserId
from tests.conftest import save_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class FixedRandom(random.Random):
    """Random source that always proposes the same suffix."""

    def __init__(self, value: int) -> None:
        super().__init__()
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return self.value


class TestBaseHandle:
    """Tests for base handle derivation."""

    @pytest.mark.parametrize(
        "display_name,email,expected",
        [
            ("Ada", "ada@example.com", "ada"),
            ("Ada Lovelace", None, "adalovelace"),
            (None, "grace.hopper@navy.mil", "gracehopper"),
            ("!!!", "___@example.com", "___"),
            ("!!!", None, "user"),
            (None, None, "user"),
        ],
    )
    def test_base_handle(self, display_name, email, expected):
        assert UserService.base_handle(display_name, email) == expected


class TestProvisionProfile:
    """Tests for first sign-in profile creation."""

    @pytest.mark.asyncio
    async def test_new_user_gets_profile_and_reservation(self, unit_env):
        """First sign-in should create a zero-point public profile and reserve its handle."""
        # Arrange
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)

        # Act
        profile, created = await user_service.provision_profile(
            UserId("u-ada"), "ada@example.com", "Ada"
        )

        # Assert
        assert created is True
        assert profile.handle == Handle("@ada")
        assert profile.points == 0
        assert profile.public_name is True
        reservation = await store.get(Collection.HANDLES, "ada")
        assert reservation.data == {"user_id": "u-ada"}

    @pytest.mark.asyncio
    async def test_taken_base_gets_three_digit_suffix(self, unit_env):
        """A second 'Ada' should get an @ada123-style handle."""
        # Arrange
        user_service = await unit_env.get(UserService)
        await user_service.provision_profile(UserId("u-1"), None, "Ada")

        # Act
        profile, created = await user_service.provision_profile(
            UserId("u-2"), None, "Ada"
        )

        # Assert
        assert created is True
        assert re.fullmatch(r"@ada\d{3}", profile.handle.root)

    @pytest.mark.asyncio
    async def test_existing_profile_is_returned_unchanged(self, unit_env):
        """Signing in again should not create anything."""
        # Arrange
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada", points=40)

        # Act
        profile, created = await user_service.provision_profile(
            UserId("u-1"), None, "Someone Else"
        )

        # Assert
        assert created is False
        assert profile.points == 40
        assert profile.handle == Handle("@ada")

    @pytest.mark.asyncio
    async def test_colliding_sign_ins_always_get_unique_handles(self, unit_env):
        """Many accounts with the same base should all end up with distinct handles."""
        # Arrange
        user_service = await unit_env.get(UserService)

        # Act
        sequential = [
            (await user_service.provision_profile(UserId(f"seq-{i}"), None, "Ada"))[0]
            for i in range(8)
        ]
        concurrent = await asyncio.gather(
            *(
                user_service.provision_profile(UserId(f"con-{i}"), None, "Ada")
                for i in range(5)
            )
        )

        # Assert
        handles = [p.handle for p in sequential] + [p.handle for p, _ in concurrent]
        assert len(set(handles)) == len(handles) == 13

    @pytest.mark.asyncio
    async def test_exhausted_allocation_falls_back_to_timestamp(self, unit_env):
        """When every proposal is taken the handle should use a timestamp suffix."""
        # Arrange
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")
        await save_user(store, "u-2", "ada417")
        user_service = UserService(
            store,
            EngagementSettings(handle_max_attempts=5),
            rng=FixedRandom(417),
            clock=lambda: 1767225600.5,
        )

        # Act
        profile, created = await user_service.provision_profile(
            UserId("u-3"), None, "Ada"
        )

        # Assert
        assert created is True
        assert profile.handle == Handle("@ada1767225600500")


class TestProfileQueries:
    """Tests for profile lookups and the leaderboard."""

    @pytest.mark.asyncio
    async def test_get_missing_profile_raises(self, unit_env):
        user_service = await unit_env.get(UserService)

        with pytest.raises(NotFoundError):
            await user_service.get_profile(UserId("ghost"))

    @pytest.mark.asyncio
    async def test_get_profile_by_handle(self, unit_env):
        """Handles should resolve through their reservation."""
        # Arrange
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")

        # Act
        found = await user_service.get_profile_by_handle(Handle("@ada"))
        missing = await user_service.get_profile_by_handle(Handle("@grace"))

        # Assert
        assert found.id == "u-1"
        assert missing is None

    @pytest.mark.asyncio
    async def test_leaderboard_is_sorted_by_points(self, unit_env):
        """Leaderboard should list the top balances, highest first."""
        # Arrange
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada", points=10)
        await save_user(store, "u-2", "grace", points=300)
        await save_user(store, "u-3", "linus", points=25)

        # Act
        top = await user_service.leaderboard(limit=2)

        # Assert
        assert [u.id for u in top] == ["u-2", "u-3"]


class TestProfileChanges:
    """Tests for update_profile and rename_handle."""

    @pytest.mark.asyncio
    async def test_update_profile_hides_name(self, unit_env):
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada", display_name="Ada")

        profile = await user_service.update_profile(UserId("u-1"), public_name=False)

        assert profile.public_name is False
        assert profile.display_name == "Ada"

    @pytest.mark.asyncio
    async def test_rename_moves_reservation(self, unit_env):
        """Renaming should reserve the new handle and release the old one."""
        # Arrange
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")

        # Act
        profile = await user_service.rename_handle(UserId("u-1"), "@countess")

        # Assert
        assert profile.handle == Handle("@countess")
        assert await store.get(Collection.HANDLES, "ada") is None
        assert (await store.get(Collection.HANDLES, "countess")).data["user_id"] == "u-1"
        assert (await store.get(Collection.USERS, "u-1")).data["handle"] == "@countess"

    @pytest.mark.asyncio
    async def test_rename_to_taken_handle_fails(self, unit_env):
        user_service = await unit_env.get(UserService)
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")
        await save_user(store, "u-2", "grace")

        with pytest.raises(ValidationError, match="already taken"):
            await user_service.rename_handle(UserId("u-1"), "grace")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["ab", "has space", "x" * 21])
    async def test_rename_to_malformed_handle_fails(self, unit_env, name):
        user_service = await unit_env.get(UserService)

        with pytest.raises(ValidationError):
            await user_service.rename_handle(UserId("u-1"), name)
