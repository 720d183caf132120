"""Readiness wait: attempt counting, spacing, diagnostic probe.

Tests cover:
    - Unreachable DB: exactly max_attempts polls, max_attempts - 1 interval sleeps
    - Budget exhausted: one diagnostic ping with output surfaced, then fatal error
    - Reachable on attempt k: returns k after k - 1 interval sleeps
    - Warm-up sleep happens first, and only when configured
"""

import logging

import pytest

from containerboot.core.errors import DatabaseUnavailableError
from containerboot.services.wait_for_database import RetryPolicy, wait_for_database
from tests.fakes import FakeProbe, FakeSleep


@pytest.mark.asyncio
async def test_unreachable_database_polls_exactly_max_attempts():
    probe = FakeProbe([False])
    sleep = FakeSleep()
    policy = RetryPolicy(warmup_seconds=5, poll_interval_seconds=2, max_attempts=30)

    with pytest.raises(DatabaseUnavailableError) as exc_info:
        await wait_for_database(probe, policy, sleep)

    assert probe.health_checks == 30
    assert sleep.delays == [5] + [2] * 29
    assert exc_info.value.attempts == 30
    assert exc_info.value.exit_code == 1


@pytest.mark.asyncio
async def test_exhausted_budget_runs_one_loud_diagnostic_ping():
    probe = FakeProbe([False])
    with pytest.raises(DatabaseUnavailableError):
        await wait_for_database(probe, RetryPolicy(0, 2, 3), FakeSleep())
    assert probe.pings == [False]


@pytest.mark.asyncio
async def test_exhausted_budget_logs_checklist_and_underlying_error(caplog):
    caplog.set_level(logging.INFO)
    with pytest.raises(DatabaseUnavailableError):
        await wait_for_database(FakeProbe([False]), RetryPolicy(0, 2, 30), FakeSleep())
    text = caplog.text
    assert "Database connection timeout after 30 attempts (60 seconds)" in text
    assert "DATABASE_URL environment variable is correctly set" in text
    assert "Database connect failed: connection refused" in text


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [1, 2, 17, 30])
async def test_reachable_on_attempt_k_returns_k(k):
    probe = FakeProbe([False] * (k - 1) + [True])
    sleep = FakeSleep()
    attempt = await wait_for_database(probe, RetryPolicy(5, 2, 30), sleep)
    assert attempt == k
    assert probe.health_checks == k
    assert sleep.delays == [5] + [2] * (k - 1)
    assert probe.pings == []


@pytest.mark.asyncio
async def test_logs_each_failed_attempt_number(caplog):
    caplog.set_level(logging.INFO)
    await wait_for_database(FakeProbe([False, False, True]), RetryPolicy(0, 2, 30), FakeSleep())
    assert "Waiting for database... (attempt 1/30)" in caplog.text
    assert "Waiting for database... (attempt 2/30)" in caplog.text
    assert "attempt 3/30" not in caplog.text


@pytest.mark.asyncio
async def test_no_warmup_sleep_when_zero():
    sleep = FakeSleep()
    await wait_for_database(FakeProbe([True]), RetryPolicy(0, 2, 30), sleep)
    assert sleep.delays == []


def test_budget_seconds_is_attempts_times_interval():
    assert RetryPolicy(5, 2, 30).budget_seconds == 60
