import pytest

from deployment.circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState


def _fail():
    raise RuntimeError("provider down")


def test_opens_after_threshold():
    breaker = CircuitBreaker(failure_threshold=2, reset_timeout=60)

    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(_fail)

    assert breaker.state == CircuitState.OPEN
    with pytest.raises(CircuitOpenError) as excinfo:
        breaker.call(lambda: "never")
    assert excinfo.value.retry_after > 0


def test_success_resets_failure_count():
    breaker = CircuitBreaker(failure_threshold=2)

    with pytest.raises(RuntimeError):
        breaker.call(_fail)
    assert breaker.call(lambda: "ok") == "ok"

    assert breaker.failures == 0
    assert breaker.state == CircuitState.CLOSED


def test_half_open_recovers_after_timeout():
    breaker = CircuitBreaker(failure_threshold=1, reset_timeout=0, half_open_max_calls=1)

    with pytest.raises(RuntimeError):
        breaker.call(_fail)
    assert breaker.state == CircuitState.OPEN

    # reset_timeout of 0 lets the next call through as a trial
    assert breaker.call(lambda: "back") == "back"
    assert breaker.state == CircuitState.CLOSED


def test_half_open_failure_reopens():
    breaker = CircuitBreaker(failure_threshold=1, reset_timeout=0)

    with pytest.raises(RuntimeError):
        breaker.call(_fail)
    with pytest.raises(RuntimeError):
        breaker.call(_fail)

    assert breaker.state == CircuitState.OPEN


def test_reset_closes_circuit():
    breaker = CircuitBreaker(failure_threshold=1, reset_timeout=60)
    with pytest.raises(RuntimeError):
        breaker.call(_fail)

    breaker.reset()

    assert breaker.get_stats()["state"] == "closed"
    assert breaker.call(lambda: 1) == 1
