"""Tests for the per-guild overview cooldown."""

from tzbot.bot.commands import OverviewCooldown


class FakeMonotonic:
    def __init__(self) -> None:
        self.now: float = 1000.0

    def __call__(self) -> float:
        return self.now


class TestOverviewCooldown:
    """Test cases for OverviewCooldown."""

    def test_disabled_by_default(self) -> None:
        """Test that a zero cooldown never suppresses requests."""
        cooldown = OverviewCooldown()

        assert not cooldown.enabled
        assert all(cooldown.try_acquire(1) for _ in range(5))

    def test_suppresses_within_window(self) -> None:
        """Test that a second request inside the window is refused."""
        clock = FakeMonotonic()
        cooldown = OverviewCooldown(10, clock=clock)

        assert cooldown.try_acquire(1)
        clock.now += 9
        assert not cooldown.try_acquire(1)
        clock.now += 1
        assert cooldown.try_acquire(1)

    def test_guilds_are_independent(self) -> None:
        """Test that one guild's cooldown does not affect another."""
        cooldown = OverviewCooldown(10, clock=FakeMonotonic())

        assert cooldown.try_acquire(1)
        assert cooldown.try_acquire(2)
        assert not cooldown.try_acquire(1)

    def test_reset(self) -> None:
        """Test clearing one guild and all guilds."""
        cooldown = OverviewCooldown(10, clock=FakeMonotonic())
        _ = cooldown.try_acquire(1)
        _ = cooldown.try_acquire(2)

        cooldown.reset(1)
        assert cooldown.try_acquire(1)
        assert not cooldown.try_acquire(2)

        cooldown.reset()
        assert cooldown.try_acquire(2)
