r"""Unit tests for the Retryable engine."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING
from unittest.mock import Mock, call

import pytest

from retryable import Retryable, RetryPolicy, TimeUnit, retry
from retryable.backoff import EXPONENTIAL, LINEAR
from retryable.config import MAX_DELAY_MS
from retryable.exceptions import MaxRetriesExceededError, RetryInterruptedError
from retryable.retry import TerminationReason

if TYPE_CHECKING:
    from collections.abc import Callable


def retry_os_error(attempt: int, exc: Exception) -> bool:  # noqa: ARG001
    return isinstance(exc, OSError)


def always(attempt: int, value: object) -> bool:  # noqa: ARG001
    return True


def never(attempt: int, value: object) -> bool:  # noqa: ARG001
    return False


def fail_then_return(failures: int, value: object, exc: Exception | None = None) -> Mock:
    """Create a task raising ``exc`` ``failures`` times, then returning
    ``value``."""
    exc = exc if exc is not None else OSError("transient")
    return Mock(side_effect=[exc] * failures + [value])


###############################
#     Tests for creation      #
###############################


def test_retryable_creation() -> None:
    task = Mock(return_value=1)
    policy = RetryPolicy()
    retryable = Retryable.of(task, policy)
    assert retryable.task is task
    assert retryable.policy is policy


def test_retryable_default_policy() -> None:
    assert isinstance(Retryable(Mock()).policy, RetryPolicy)


@pytest.mark.parametrize("task", [None, 42, "task"])
def test_retryable_rejects_invalid_task(task: object) -> None:
    with pytest.raises(TypeError, match=r"task must"):
        Retryable.of(task)  # type: ignore[arg-type]


######################################
#     Tests for success outcomes     #
######################################


def test_run_success_on_first_attempt() -> None:
    task = Mock(return_value=42)
    outcome = Retryable.of(task).run()
    assert outcome.succeeded
    assert outcome.data == 42
    assert outcome.attempts == 1
    assert outcome.reason is TerminationReason.SUCCEEDED
    assert outcome.to_result().is_success()
    assert outcome.to_result().data == 42
    task.assert_called_once_with()


def test_run_success_with_none_result() -> None:
    outcome = Retryable.of(lambda: None).run()
    assert outcome.succeeded
    assert outcome.data is None


def test_call_and_dunder_call_are_run() -> None:
    retryable = Retryable.of(Mock(return_value=7))
    assert retryable.call().data == 7
    assert retryable().data == 7


def test_run_retries_until_validation_passes(mock_sleep: Mock) -> None:
    task = Mock(side_effect=[1, 2])
    policy = RetryPolicy().retry_until_result(lambda attempt, value: value == 2).max_retries(3)
    outcome = Retryable.of(task, policy).run()
    assert outcome.succeeded
    assert outcome.data == 2
    assert outcome.attempts == 2
    assert task.call_count == 2
    mock_sleep.assert_not_called()


@pytest.mark.parametrize("k", [1, 2, 3, 5])
def test_run_success_on_attempt_k(k: int) -> None:
    task = Mock(side_effect=list(range(1, k + 1)))
    policy = RetryPolicy().retry_until_result(lambda attempt, value: value == k).max_retries(k - 1)
    outcome = Retryable.of(task, policy).run()
    assert outcome.succeeded
    assert outcome.attempts == k
    assert outcome.data == k


def test_run_retryable_exception_then_success(mock_sleep: Mock) -> None:
    task = fail_then_return(1, 100, exc=OSError("io"))
    policy = (
        RetryPolicy().retry_on_failure(retry_os_error).retry_until_result(always).max_retries(2)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.succeeded
    assert outcome.attempts == 2
    assert outcome.data == 100
    assert task.call_count == 2


########################################
#     Tests for exhaustion outcomes    #
########################################


def test_run_invalid_result_exhausted() -> None:
    policy = RetryPolicy().retry_until_result(lambda attempt, value: value == 2).max_retries(1)
    outcome = Retryable.of(lambda: 1, policy).run()
    assert not outcome.succeeded
    assert outcome.attempts == 2
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_INVALID_RESULT
    assert outcome.invalid_data == 1
    assert isinstance(outcome.error, MaxRetriesExceededError)
    assert "validation failed" in str(outcome.error)


@pytest.mark.parametrize("max_retries", [0, 1, 2, 5, 10])
def test_run_invalid_result_attempts(max_retries: int) -> None:
    task = Mock(return_value=1)
    policy = RetryPolicy().retry_until_result(never).max_retries(max_retries)
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == max_retries + 1
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_INVALID_RESULT
    assert task.call_count == max_retries + 1


@pytest.mark.parametrize("max_retries", [0, 1, 3, 7])
def test_run_retryable_exception_exhausted(max_retries: int) -> None:
    errors = [OSError(f"attempt {i}") for i in range(max_retries + 1)]
    task = Mock(side_effect=errors)
    policy = RetryPolicy().retry_on_failure(retry_os_error).max_retries(max_retries)
    outcome = Retryable.of(task, policy).run()
    assert not outcome.succeeded
    assert outcome.attempts == max_retries + 1
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION
    assert outcome.error is errors[-1]
    assert outcome.invalid_data is None


def test_run_last_attempt_decides_exhaustion_reason() -> None:
    """Test that a rejected value on the last attempt wins over an earlier
    retryable exception."""
    task = Mock(side_effect=[OSError("io"), 1])
    policy = RetryPolicy().retry_on_failure(retry_os_error).retry_until_result(never).max_retries(1)
    outcome = Retryable.of(task, policy).run()
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_INVALID_RESULT
    assert outcome.invalid_data == 1


def test_run_negative_max_retries_runs_once() -> None:
    task = Mock(side_effect=OSError("io"))
    policy = RetryPolicy().retry_on_failure(retry_os_error).max_retries(-5)
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == 1
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION


####################################
#     Tests for abort outcomes     #
####################################


def test_run_default_policy_aborts_on_exception() -> None:
    error = RuntimeError("bad state")
    task = Mock(side_effect=error)
    outcome = Retryable.of(task, RetryPolicy().max_retries(3)).run()
    assert outcome.attempts == 1
    assert outcome.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION
    assert outcome.error is error
    task.assert_called_once()


@pytest.mark.parametrize("max_retries", [0, 1, 10])
def test_run_non_retryable_exception(max_retries: int) -> None:
    task = Mock(side_effect=ValueError("bad input"))
    policy = RetryPolicy().retry_on_failure(retry_os_error).max_retries(max_retries)
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == 1
    assert outcome.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION
    assert isinstance(outcome.error, ValueError)


def test_run_non_retryable_after_retryable() -> None:
    task = Mock(side_effect=[OSError("io"), ValueError("bad")])
    policy = RetryPolicy().retry_on_failure(retry_os_error).max_retries(5)
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == 2
    assert outcome.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION


def test_run_skip_predicate_wins_over_retryable() -> None:
    error = PermissionError("denied")
    task = Mock(side_effect=error)
    retryable_predicate = Mock(return_value=True)
    policy = (
        RetryPolicy()
        .retry_on_failure(retryable_predicate)
        .no_retry_on_failure(lambda attempt, exc: isinstance(exc, PermissionError))
        .max_retries(3)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == 1
    assert outcome.reason is TerminationReason.ABORTED_SKIP_RETRY_EXCEPTION
    assert outcome.error is error
    retryable_predicate.assert_not_called()


def test_run_skip_predicate_wins_over_budget_exhaustion() -> None:
    task = Mock(side_effect=[OSError("io"), PermissionError("denied")])
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .no_retry_on_exceptions(PermissionError)
        .max_retries(1)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.attempts == 2
    assert outcome.reason is TerminationReason.ABORTED_SKIP_RETRY_EXCEPTION


def test_run_skip_predicate_not_consulted_for_values() -> None:
    skip = Mock(return_value=True)
    outcome = Retryable.of(lambda: 1, RetryPolicy().no_retry_on_failure(skip)).run()
    assert outcome.succeeded
    skip.assert_not_called()


def test_run_does_not_catch_base_exceptions() -> None:
    task = Mock(side_effect=KeyboardInterrupt)
    with pytest.raises(KeyboardInterrupt):
        Retryable.of(task, RetryPolicy().retry_on_exceptions(Exception)).run()


##########################################
#     Tests for predicate arguments      #
##########################################


def test_run_predicates_receive_attempt_numbers() -> None:
    result_predicate = Mock(side_effect=[False, False, True])
    exception_predicate = Mock(return_value=True)
    error = OSError("io")
    task = Mock(side_effect=[10, error, 20, 30])
    policy = (
        RetryPolicy()
        .retry_until_result(result_predicate)
        .retry_on_failure(exception_predicate)
        .max_retries(5)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.data == 30
    assert outcome.attempts == 4
    assert result_predicate.call_args_list == [call(1, 10), call(3, 20), call(4, 30)]
    exception_predicate.assert_called_once_with(2, error)


def test_run_predicates_can_depend_on_attempt() -> None:
    policy = RetryPolicy().retry_on_failure(lambda attempt, exc: attempt < 2).max_retries(10)
    outcome = Retryable.of(Mock(side_effect=OSError("io")), policy).run()
    assert outcome.attempts == 2
    assert outcome.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION


###########################################
#     Tests for uncaught predicate bugs   #
###########################################


def test_run_result_predicate_exception_propagates() -> None:
    task = Mock(return_value=1)
    policy = RetryPolicy().retry_until_result(Mock(side_effect=ZeroDivisionError)).max_retries(3)
    with pytest.raises(ZeroDivisionError):
        Retryable.of(task, policy).run()
    task.assert_called_once()


def test_run_exception_predicate_exception_propagates() -> None:
    policy = RetryPolicy().retry_on_failure(Mock(side_effect=AttributeError("oops")))
    with pytest.raises(AttributeError, match=r"oops"):
        Retryable.of(Mock(side_effect=OSError("io")), policy).run()


def test_run_skip_predicate_exception_propagates() -> None:
    policy = RetryPolicy().no_retry_on_failure(Mock(side_effect=LookupError("oops")))
    with pytest.raises(LookupError, match=r"oops"):
        Retryable.of(Mock(side_effect=OSError("io")), policy).run()


def test_run_backoff_exception_propagates() -> None:
    policy = (
        RetryPolicy()
        .retry_until_result(never)
        .max_retries(2)
        .backoff(Mock(side_effect=ArithmeticError("oops")))
    )
    with pytest.raises(ArithmeticError, match=r"oops"):
        Retryable.of(Mock(return_value=1), policy).run()


##############################
#     Tests for backoff      #
##############################


@pytest.mark.parametrize(
    ("backoff", "sleeps"),
    [
        (LINEAR, [0.1, 0.2, 0.3]),
        (EXPONENTIAL, [0.1, 0.2, 0.4]),
    ],
)
def test_run_sleeps_with_backoff(
    mock_sleep: Mock, backoff: Callable[[int, int], int], sleeps: list[float]
) -> None:
    policy = RetryPolicy().retry_until_result(never).max_retries(3).base_delay(100).backoff(backoff)
    outcome = Retryable.of(Mock(return_value=0), policy).run()
    assert outcome.attempts == 4
    assert mock_sleep.call_args_list == [call(seconds) for seconds in sleeps]


def test_run_fixed_backoff_is_default(mock_sleep: Mock) -> None:
    policy = RetryPolicy().retry_until_result(never).max_retries(2).base_delay(50)
    Retryable.of(Mock(return_value=0), policy).run()
    assert mock_sleep.call_args_list == [call(0.05), call(0.05)]


def test_run_no_sleep_after_last_attempt(mock_sleep: Mock) -> None:
    policy = RetryPolicy().retry_on_exceptions(OSError).max_retries(1).base_delay(10)
    Retryable.of(Mock(side_effect=OSError("io")), policy).run()
    mock_sleep.assert_called_once_with(0.01)


def test_run_no_sleep_without_delay(mock_sleep: Mock) -> None:
    policy = RetryPolicy().retry_until_result(never).max_retries(3)
    Retryable.of(Mock(return_value=0), policy).run()
    mock_sleep.assert_not_called()


def test_run_custom_backoff_function(mock_sleep: Mock) -> None:
    strategy = Mock(return_value=30)
    task = Mock(side_effect=[1, 7])
    policy = (
        RetryPolicy()
        .retry_until_result(lambda attempt, value: value == 7)
        .max_retries(1)
        .base_delay(5)
        .backoff(strategy)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.data == 7
    strategy.assert_called_once_with(5, 1)
    mock_sleep.assert_called_once_with(0.03)


def test_run_negative_custom_delay_does_not_sleep(mock_sleep: Mock) -> None:
    policy = RetryPolicy().retry_until_result(never).max_retries(1).backoff(lambda b, a: -5)
    Retryable.of(Mock(return_value=0), policy).run()
    mock_sleep.assert_not_called()


###################################
#     Tests for cancellation      #
###################################


def test_run_interrupted_when_event_already_set(cancel_event: threading.Event) -> None:
    cancel_event.set()
    task = Mock(side_effect=OSError("io"))
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .max_retries(3)
        .base_delay(10)
        .cancel_on(cancel_event)
    )
    outcome = Retryable.of(task, policy).run()
    assert not outcome.succeeded
    assert outcome.reason is TerminationReason.INTERRUPTED
    assert outcome.attempts == 1
    assert isinstance(outcome.error, RetryInterruptedError)
    assert outcome.to_result().is_failure()
    assert isinstance(outcome.to_result().error, RetryInterruptedError)
    assert cancel_event.is_set()
    task.assert_called_once()


def test_run_interrupted_during_wait_before_second_attempt(cancel_event: threading.Event) -> None:
    task = Mock(return_value=1)
    policy = (
        RetryPolicy()
        .retry_until_result(never)
        .max_retries(5)
        .base_delay(30, unit=TimeUnit.SECONDS)
        .cancel_on(cancel_event)
    )
    timer = threading.Timer(0.05, cancel_event.set)
    timer.start()
    try:
        outcome = Retryable.of(task, policy).run()
    finally:
        timer.cancel()
    assert outcome.reason is TerminationReason.INTERRUPTED
    assert outcome.attempts == 1
    assert isinstance(outcome.error, RetryInterruptedError)
    assert cancel_event.is_set()
    task.assert_called_once()


def test_run_interrupted_during_max_delay_wait(cancel_event: threading.Event) -> None:
    task = Mock(side_effect=ConnectionError("refused"))
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .max_retries(1)
        .base_delay(1)
        .backoff(lambda base, attempt: MAX_DELAY_MS)
        .cancel_on(cancel_event)
    )
    timer = threading.Timer(0.05, cancel_event.set)
    timer.start()
    try:
        outcome = Retryable.of(task, policy).run()
    finally:
        timer.cancel()
    assert outcome.reason is TerminationReason.INTERRUPTED
    assert outcome.attempts == 1


def test_run_max_delay_sleeps_in_chunks(mock_sleep: Mock) -> None:
    mock_sleep.side_effect = [None, KeyboardInterrupt]
    task = Mock(side_effect=ConnectionError("refused"))
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .max_retries(1)
        .backoff(lambda base, attempt: MAX_DELAY_MS)
    )
    with pytest.raises(KeyboardInterrupt):
        Retryable.of(task, policy).run()
    assert mock_sleep.call_args_list == [call(86_400.0), call(86_400.0)]


def test_run_event_not_checked_without_delay(cancel_event: threading.Event) -> None:
    """Test that cancellation is only observed while waiting."""
    cancel_event.set()
    task = Mock(side_effect=[OSError("io"), 5])
    policy = RetryPolicy().retry_on_exceptions(OSError).max_retries(1).cancel_on(cancel_event)
    outcome = Retryable.of(task, policy).run()
    assert outcome.succeeded
    assert outcome.data == 5


def test_run_event_not_set_waits_full_delay(cancel_event: threading.Event) -> None:
    task = Mock(side_effect=[OSError("io"), 5])
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .max_retries(1)
        .base_delay(1)
        .cancel_on(cancel_event)
    )
    outcome = Retryable.of(task, policy).run()
    assert outcome.succeeded
    assert outcome.attempts == 2


###############################
#     Tests for callbacks     #
###############################


def test_run_on_retry_callback(mock_callback: Mock, mock_sleep: Mock) -> None:
    error = OSError("io")
    task = Mock(side_effect=[error, 3, 4])
    policy = (
        RetryPolicy()
        .retry_on_exceptions(OSError)
        .retry_until_result(lambda attempt, value: value == 4)
        .max_retries(3)
        .base_delay(10)
        .backoff(LINEAR)
        .on_retry(mock_callback)
    )
    Retryable.of(task, policy).run()
    assert mock_callback.call_count == 2
    first, second = (args[0] for args, _ in mock_callback.call_args_list)
    assert (first.attempt, first.max_retries, first.delay_ms, first.error) == (1, 3, 10, error)
    assert first.invalid_data is None
    assert (second.attempt, second.delay_ms, second.error, second.invalid_data) == (2, 20, None, 3)


def test_run_on_success_callback(mock_callback: Mock) -> None:
    policy = RetryPolicy().on_success(mock_callback)
    outcome = Retryable.of(Mock(return_value=1), policy).run()
    mock_callback.assert_called_once_with(outcome)


def test_run_on_failure_callback(mock_callback: Mock) -> None:
    on_success = Mock()
    policy = RetryPolicy().on_failure(mock_callback).on_success(on_success)
    outcome = Retryable.of(Mock(side_effect=ValueError("bad")), policy).run()
    mock_callback.assert_called_once_with(outcome)
    on_success.assert_not_called()


def test_run_callback_exception_propagates() -> None:
    policy = RetryPolicy().on_success(Mock(side_effect=RuntimeError("callback bug")))
    with pytest.raises(RuntimeError, match=r"callback bug"):
        Retryable.of(Mock(return_value=1), policy).run()


##############################################
#     Tests for policy snapshot and reuse    #
##############################################


def test_run_policy_changes_do_not_affect_current_run() -> None:
    policy = RetryPolicy()

    def predicate(attempt: int, value: int) -> bool:  # noqa: ARG001
        policy.max_retries(10)
        return False

    policy.retry_until_result(predicate).max_retries(1)
    outcome = Retryable.of(Mock(return_value=0), policy).run()
    assert outcome.attempts == 2


def test_run_same_retryable_multiple_times() -> None:
    task = Mock(side_effect=[OSError("io"), 100, ValueError("bad")])
    retryable = Retryable.of(task, RetryPolicy().retry_until_result(always))
    outcome1 = retryable.run()
    outcome2 = retryable.run()
    outcome3 = retryable.run()
    assert outcome1.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION
    assert outcome2.succeeded
    assert outcome2.data == 100
    assert outcome3.reason is TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION
    assert all(outcome.attempts == 1 for outcome in (outcome1, outcome2, outcome3))
    assert task.call_count == 3


def test_policy_execute() -> None:
    outcome = RetryPolicy().retry_on_exceptions(OSError).max_retries(1).execute(
        fail_then_return(1, "ok")
    )
    assert outcome.succeeded
    assert outcome.data == "ok"
    assert outcome.attempts == 2


################################
#     Tests for concurrency    #
################################


def test_retryable_with_thread_pool() -> None:
    task = fail_then_return(1, "Success on attempt 2")
    retryable = Retryable.of(task, RetryPolicy().retry_on_exceptions(OSError).max_retries(2))
    with ThreadPoolExecutor(max_workers=1) as executor:
        outcome = executor.submit(retryable).result(timeout=10)
    assert outcome.succeeded
    assert outcome.data == "Success on attempt 2"
    assert outcome.attempts == 2


def test_separate_retryables_run_concurrently() -> None:
    def make_task(index: int) -> Callable[[], int]:
        calls = iter([OSError("io"), index])

        def task() -> int:
            value = next(calls)
            if isinstance(value, Exception):
                raise value
            return value

        return task

    policy = RetryPolicy().retry_on_exceptions(OSError).max_retries(1)
    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(Retryable.of(make_task(i), policy)) for i in range(50)]
        outcomes = [future.result(timeout=10) for future in futures]
    assert all(outcome.succeeded and outcome.attempts == 2 for outcome in outcomes)
    assert sorted(outcome.data for outcome in outcomes) == list(range(50))


##############################
#     Tests for decorator    #
##############################


def test_retry_decorator_success() -> None:
    @retry(RetryPolicy().retry_on_exceptions(ZeroDivisionError).max_retries(2))
    def divide(a: int, b: int) -> float:
        return a / b

    outcome = divide(6, b=3)
    assert outcome.succeeded
    assert outcome.data == 2.0
    assert divide.__name__ == "divide"


def test_retry_decorator_exhausted() -> None:
    mock = Mock(side_effect=OSError("io"))

    @retry(RetryPolicy().retry_on_exceptions(OSError).max_retries(2))
    def read(path: str) -> str:
        return mock(path)

    outcome = read("/tmp/x")
    assert outcome.attempts == 3
    assert outcome.reason is TerminationReason.RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION
    assert mock.call_args_list == [call("/tmp/x")] * 3


def test_retry_decorator_default_policy() -> None:
    @retry()
    def answer() -> int:
        return 42

    assert answer().data == 42
