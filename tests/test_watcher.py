# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Tests for the token lifetime watcher."""

import queue
from unittest.mock import MagicMock

import pytest

from vault_sync import AuthSession, LeaseRejectedError, LeaseRenewalError, SecretReadError
from vault_sync.watcher import LeaseDone, LeaseRenewal, LifetimeWatcher


def _session(lease: float, renewable: bool = True) -> AuthSession:
    return AuthSession(token="hvs.token", lease_duration=lease, renewable=renewable)


@pytest.fixture
def no_jitter():
    """Random source that always picks the lowest grace period."""
    rng = MagicMock()
    rng.uniform.return_value = 0.0
    return rng


@pytest.fixture
def events():
    return queue.Queue()


class TestLifetimeWatcher:
    """Test suite for LifetimeWatcher."""

    def test_not_renewable_ends_immediately(self, events):
        store = MagicMock()
        watcher = LifetimeWatcher(store, _session(60, renewable=False), events)

        watcher.start()
        event = events.get(timeout=2)
        watcher.stop()

        assert isinstance(event, LeaseDone)
        assert isinstance(event.error, LeaseRenewalError)
        store.renew_token.assert_not_called()

    def test_rejected_renewal_ends_with_error(self, events):
        store = MagicMock()
        store.renew_token.side_effect = LeaseRejectedError("permission denied")
        watcher = LifetimeWatcher(store, _session(60), events)

        watcher.start()
        event = events.get(timeout=2)
        watcher.stop()

        assert isinstance(event, LeaseDone)
        assert str(event.error) == "permission denied"
        assert store.renew_token.call_count == 1

    def test_other_store_errors_become_lease_errors(self, events, no_jitter):
        store = MagicMock()
        store.renew_token.side_effect = SecretReadError("unexpected")
        watcher = LifetimeWatcher(store, _session(0.3), events, rng=no_jitter, base_delay=0.05)

        watcher.start()
        event = events.get(timeout=3)
        watcher.stop()

        assert isinstance(event.error, LeaseRenewalError)
        assert isinstance(event.error.__cause__, SecretReadError)

    def test_transient_failure_is_retried(self, events, no_jitter):
        """Test that a failed renewal with lease left keeps the watcher going."""
        store = MagicMock()
        store.renew_token.side_effect = [LeaseRenewalError("connection reset"), _session(3600)]
        watcher = LifetimeWatcher(store, _session(3600), events, rng=no_jitter)

        watcher.start()
        event = events.get(timeout=2)
        watcher.stop()

        assert isinstance(event, LeaseRenewal)
        assert event.session.lease_duration == 3600
        assert store.renew_token.call_count == 2

    def test_failures_until_inside_grace_end_with_error(self, events, no_jitter):
        store = MagicMock()
        store.renew_token.side_effect = LeaseRenewalError("connection reset")
        watcher = LifetimeWatcher(store, _session(1.0), events, rng=no_jitter, base_delay=0.1)

        watcher.start()
        event = events.get(timeout=3)
        watcher.stop()

        assert isinstance(event, LeaseDone)
        assert str(event.error) == "connection reset"
        assert store.renew_token.call_count > 1
        assert events.empty()

    def test_renews_immediately_and_emits_event(self, events, no_jitter):
        store = MagicMock()
        store.renew_token.return_value = _session(3600)
        watcher = LifetimeWatcher(store, _session(3600), events, increment=3600, rng=no_jitter)

        watcher.start()
        event = events.get(timeout=2)
        watcher.stop()

        assert isinstance(event, LeaseRenewal)
        assert event.session.lease_duration == 3600
        store.renew_token.assert_called_once_with(3600)
        assert events.empty()

    def test_ends_cleanly_when_lease_stops_growing(self, events, no_jitter):
        """Test the terminal event once renewals no longer extend the lease."""
        store = MagicMock()
        store.renew_token.side_effect = [_session(1.0), _session(0.2)]
        watcher = LifetimeWatcher(store, _session(1.0), events, rng=no_jitter)

        watcher.start()
        received = [events.get(timeout=3) for _ in range(3)]
        watcher.stop()

        assert isinstance(received[0], LeaseRenewal)
        assert isinstance(received[1], LeaseRenewal)
        assert isinstance(received[2], LeaseDone)
        assert received[2].error is None

    def test_stop_interrupts_sleep(self, events, no_jitter):
        store = MagicMock()
        store.renew_token.return_value = _session(3600)
        watcher = LifetimeWatcher(store, _session(3600), events, rng=no_jitter)

        watcher.start()
        events.get(timeout=2)
        watcher.stop(timeout=2)

        assert watcher._thread is not None
        assert not watcher._thread.is_alive()

    def test_start_twice(self, events):
        watcher = LifetimeWatcher(MagicMock(), _session(60, renewable=False), events)
        watcher.start()

        with pytest.raises(RuntimeError, match="already started"):
            watcher.start()
        watcher.stop()


class TestSleepCalculation:
    """Tests for grace and sleep calculation."""

    def test_sleep_is_two_thirds_plus_grace_third(self, events, no_jitter):
        watcher = LifetimeWatcher(MagicMock(), _session(30), events, rng=no_jitter)

        sleep = watcher.sleep_duration(30, 0)

        assert watcher.grace == pytest.approx(3.0)
        assert sleep == pytest.approx(21.0)

    def test_grace_is_between_ten_and_twenty_percent(self, events):
        watcher = LifetimeWatcher(MagicMock(), _session(100), events)

        for _ in range(50):
            watcher.calculate_grace(100)
            assert 10.0 <= watcher.grace <= 20.0

    def test_grace_uses_smaller_increment(self, events, no_jitter):
        watcher = LifetimeWatcher(MagicMock(), _session(30), events, increment=10, rng=no_jitter)

        watcher.calculate_grace(30)

        assert watcher.grace == pytest.approx(1.0)

    def test_grace_kept_when_lease_shrinks(self, events, no_jitter):
        watcher = LifetimeWatcher(MagicMock(), _session(30), events, rng=no_jitter)
        watcher.sleep_duration(30, 0)

        watcher.sleep_duration(10, 30)

        assert watcher.grace == pytest.approx(3.0)


class TestRetryDelay:
    """Tests for the backoff between failed renewals."""

    def test_delay_doubles_per_failure(self, events, no_jitter):
        watcher = LifetimeWatcher(MagicMock(), _session(30), events, rng=no_jitter, base_delay=1.0)

        assert watcher.retry_delay(1) == pytest.approx(0.5)
        assert watcher.retry_delay(2) == pytest.approx(1.0)
        assert watcher.retry_delay(3) == pytest.approx(2.0)

    def test_delay_is_capped(self, events, no_jitter):
        watcher = LifetimeWatcher(
            MagicMock(), _session(30), events, rng=no_jitter, base_delay=1.0, max_delay=4.0
        )

        assert watcher.retry_delay(10) == pytest.approx(2.0)

    def test_jitter_stays_within_delay(self, events):
        watcher = LifetimeWatcher(MagicMock(), _session(30), events, base_delay=1.0)

        for _ in range(50):
            assert 2.0 <= watcher.retry_delay(3) <= 4.0
