import logging

import pytest

from ryogoku.operator.config import OperatorConfig
from ryogoku.operator.devnet.policy import Action, ErrorPolicy


def test_action_constructors():
    assert Action.requeue(30).requeue_after == 30
    assert Action.await_change().requeue_after is None


def test_fixed_delay_without_backoff():
    policy = ErrorPolicy(base_delay=10, backoff=False)
    assert [policy.delay_for(retry) for retry in range(5)] == [10, 10, 10, 10, 10]


def test_backoff_doubles_until_cap():
    policy = ErrorPolicy(base_delay=10, max_delay=300, jitter=0)
    assert [policy.delay_for(retry) for retry in range(7)] == [10, 20, 40, 80, 160, 300, 300]


def test_backoff_survives_huge_retry_counts():
    policy = ErrorPolicy(base_delay=10, max_delay=300, jitter=0)
    assert policy.delay_for(10_000) == 300


@pytest.mark.parametrize("rng_value", [0.0, 0.5, 1.0])
def test_jitter_stays_within_bounds(rng_value):
    policy = ErrorPolicy(base_delay=10, max_delay=300, jitter=0.1)

    delay = policy.delay_for(2, rng=lambda: rng_value)

    assert 36 <= delay <= 44
    assert policy.delay_for(20, rng=lambda: rng_value) <= 300


def test_from_config():
    config = OperatorConfig(retry_delay=5, retry_max_delay=60, retry_backoff=False)
    policy = ErrorPolicy.from_config(config)
    assert policy == ErrorPolicy(base_delay=5, max_delay=60, backoff=False)


def test_on_error_requeues_and_logs(caplog):
    policy = ErrorPolicy(base_delay=10, backoff=False)
    logger = logging.getLogger("ryogoku.tests.policy")

    with caplog.at_level(logging.WARNING, logger="ryogoku.tests.policy"):
        action = policy.on_error(RuntimeError("boom"), 0, logger)

    assert action.requeue_after == 10
    assert "boom" in caplog.text
