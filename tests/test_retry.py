import pytest

from TOP100.errors import InvalidArgument
from TOP100.models import FailureRecord
from TOP100.retry import compute_backoff_delay, retry_once, validate_strategy
from tests.conftest import API


def _failure(tid, status, retry_after=None):
    return FailureRecord(
        http_status=status,
        source_url=f"{API}/audio-analysis/{tid}",
        retry_after_seconds=retry_after,
        track_id=tid,
    )


def test_backoff_first_rate_limit_wins():
    failures = [_failure("a", 500), _failure("b", 429, 5), _failure("c", 429, 20)]
    assert compute_backoff_delay(failures) == 7
    assert compute_backoff_delay(failures, strategy="max") == 22


def test_backoff_unknown_retry_after_counts_as_zero():
    assert compute_backoff_delay([_failure("a", 429)]) == 2


def test_backoff_without_rate_limit():
    assert compute_backoff_delay([_failure("a", 500), _failure("b", 503)]) == 0
    assert compute_backoff_delay([]) == 0


def test_backoff_unknown_strategy_rejected_without_rate_limit():
    with pytest.raises(InvalidArgument):
        compute_backoff_delay([_failure("a", 429)], strategy="median")
    with pytest.raises(InvalidArgument):
        compute_backoff_delay([_failure("a", 500)], strategy="maximum")
    with pytest.raises(InvalidArgument):
        compute_backoff_delay([], strategy="maximum")


def test_validate_strategy():
    assert validate_strategy("first") == "first"
    assert validate_strategy("max") == "max"
    with pytest.raises(InvalidArgument):
        validate_strategy("maximum")


@pytest.mark.asyncio
async def test_retry_once_rejects_unknown_strategy_before_waiting(fake, credentials, sleep):
    async with fake.client() as client:
        with pytest.raises(InvalidArgument):
            await retry_once(
                [_failure("a", 429, 5)], credentials, client, sleep=sleep, strategy="maximum"
            )

    assert sleep.delays == []
    assert fake.requests == []


@pytest.mark.asyncio
async def test_retry_once_waits_then_retries_each_url_concurrently(fake, credentials, sleep):
    failures = [_failure("a", 429, 5), _failure("b", 500), _failure("c", 500)]
    async with fake.client() as client:
        outcome = await retry_once(failures, credentials, client, sleep=sleep)

    assert sleep.delays == [7]
    assert outcome.delay == 7
    assert sorted(fake.paths("/v1/audio-analysis/")) == [
        "/v1/audio-analysis/a", "/v1/audio-analysis/b", "/v1/audio-analysis/c",
    ]
    assert fake.max_in_flight == 3
    assert set(outcome.analyses) == {"a", "b", "c"}
    assert outcome.analyses["b"]["track"]["id"] == "b"
    assert outcome.residual_failures == 0


@pytest.mark.asyncio
async def test_retry_once_counts_residual_failures(fake, credentials, sleep):
    fake.analysis_script = {"a": [(429, {"Retry-After": "1"})], "b": ["network"]}
    failures = [_failure("a", 429, 3), _failure("b", 500), _failure("c", 500)]
    async with fake.client() as client:
        outcome = await retry_once(failures, credentials, client, sleep=sleep)

    assert outcome.residual_failures == 2
    assert set(outcome.analyses) == {"c"}
    # 재시도는 한 번뿐
    assert len(fake.paths("/v1/audio-analysis/")) == 3
    assert sleep.delays == [5]


@pytest.mark.asyncio
async def test_retry_once_no_rate_limit_does_not_sleep(fake, credentials, sleep):
    async with fake.client() as client:
        outcome = await retry_once([_failure("a", 502)], credentials, client, sleep=sleep)

    assert sleep.delays == []
    assert outcome.delay == 0
    assert set(outcome.analyses) == {"a"}


@pytest.mark.asyncio
async def test_retry_once_empty_fast_path(fake, credentials, sleep):
    async with fake.client() as client:
        outcome = await retry_once([], credentials, client, sleep=sleep)

    assert sleep.delays == []
    assert fake.requests == []
    assert outcome.analyses == {} and outcome.residual_failures == 0


@pytest.mark.asyncio
async def test_retry_once_falls_back_to_url_path_for_id(fake, credentials, sleep):
    failure = FailureRecord(http_status=500, source_url=f"{API}/audio-analysis/zz")
    async with fake.client() as client:
        outcome = await retry_once([failure], credentials, client, sleep=sleep)

    assert set(outcome.analyses) == {"zz"}
