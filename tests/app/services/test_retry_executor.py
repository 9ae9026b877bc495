"""Testes do executor de retry com backoff exponencial."""

from __future__ import annotations

import pytest
from tests.fakes.fake_clock import RecordingSleep

from app.services.retry_executor import RetryExecutor
from utils.errors import (
    AuthError,
    CalendarApiError,
    NotFoundError,
    RateLimitError,
    TransientServerError,
    UnknownError,
    ValidationError,
    classify_status,
)


class _ScriptedOperation:
    """Levanta os erros programados em ordem e depois devolve "ok"."""

    def __init__(self, *errors: BaseException) -> None:
        self._errors = list(errors)
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self._errors:
            raise self._errors.pop(0)
        return "ok"


def _executor(sleep: RecordingSleep, max_retries: int = 3) -> RetryExecutor:
    return RetryExecutor(max_retries, 1.0, 2.0, sleep=sleep)


@pytest.mark.asyncio
async def test_retries_transient_errors_until_success() -> None:
    sleep = RecordingSleep()
    operation = _ScriptedOperation(
        TransientServerError(status_code=503),
        TransientServerError(status_code=503),
    )

    result = await _executor(sleep).run(operation)

    assert result == "ok"
    assert operation.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_auth_error_is_not_retried() -> None:
    sleep = RecordingSleep()
    error = AuthError(status_code=401)
    operation = _ScriptedOperation(error)

    with pytest.raises(AuthError) as exc_info:
        await _executor(sleep).run(operation)

    assert exc_info.value is error
    assert operation.calls == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_rate_limit_adds_cooldown_before_backoff() -> None:
    sleep = RecordingSleep()
    operation = _ScriptedOperation(RateLimitError(status_code=429))

    await _executor(sleep).run(operation)

    assert sleep.delays == [4.0, 1.0]


@pytest.mark.asyncio
async def test_exhaustion_reraises_original_error() -> None:
    sleep = RecordingSleep()
    errors = [TransientServerError(status_code=500) for _ in range(4)]
    operation = _ScriptedOperation(*errors)

    with pytest.raises(TransientServerError) as exc_info:
        await _executor(sleep).run(operation)

    assert exc_info.value is errors[-1]
    assert operation.calls == 4
    assert sleep.delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_max_retries_override_per_call() -> None:
    sleep = RecordingSleep()
    operation = _ScriptedOperation(*(TransientServerError(status_code=503) for _ in range(3)))

    with pytest.raises(TransientServerError):
        await _executor(sleep).run(operation, max_retries=1)

    assert operation.calls == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ValidationError(status_code=400),
        NotFoundError(status_code=404),
        AuthError(status_code=403),
        UnknownError("sem status"),
        RuntimeError("bug local"),
    ],
)
async def test_terminal_errors_fail_fast(error: BaseException) -> None:
    operation = _ScriptedOperation(error)

    with pytest.raises(type(error)):
        await _executor(RecordingSleep()).run(operation)

    assert operation.calls == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [408, 409, 500, 502, 503, 504])
async def test_non_terminal_statuses_are_retried(status_code: int) -> None:
    operation = _ScriptedOperation(classify_status(status_code, "falha"))

    assert await _executor(RecordingSleep()).run(operation) == "ok"
    assert operation.calls == 2


@pytest.mark.asyncio
async def test_network_errors_marked_retryable_are_retried() -> None:
    operation = _ScriptedOperation(TransientServerError("timeout", is_retryable=True))

    assert await _executor(RecordingSleep()).run(operation) == "ok"


def test_backoff_delay_grows_exponentially() -> None:
    executor = _executor(RecordingSleep())

    assert [executor.backoff_delay(attempt) for attempt in range(4)] == [1.0, 2.0, 4.0, 8.0]


def test_error_taxonomy_shares_base_class() -> None:
    assert issubclass(RateLimitError, CalendarApiError)
