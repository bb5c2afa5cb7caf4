"""
Tests for LongRunningOperation.
"""

import pytest
from unittest.mock import MagicMock

from channel_common.exceptions import (
    OperationFailedException,
    OperationTimeoutException,
)
from channel_common.operations import (
    LongRunningOperation,
    OperationState,
    MAX_POLL_INTERVAL,
)

OPERATION_NAME = "operations/entitlement-abc123"

ENTITLEMENT = {
    "name": "accounts/C012345/customers/Snh6kUpcdvT2vm/entitlements/Sc7dSgCRqffeYc",
    "offer": "accounts/C012345/offers/S240y00K5UnCo9",
    "provisionedService": {"provisioningId": "01A2B3-C4D5E6-F7G8H9"},
}


def pending():
    return {"name": OPERATION_NAME, "done": False, "metadata": {"operationType": "CREATE_ENTITLEMENT"}}


def succeeded(response=None):
    response = dict(response or ENTITLEMENT)
    response["@type"] = "type.googleapis.com/google.cloud.channel.v1.Entitlement"
    return {"name": OPERATION_NAME, "done": True, "response": response}


def failed():
    return {
        "name": OPERATION_NAME,
        "done": True,
        "error": {"code": 6, "message": "Entitlement already exists"},
    }


class FakeClock:
    """Clock advanced by the fake sleep"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def make(operation, refresh, clock, **kwargs):
    return LongRunningOperation(
        operation, refresh=refresh, sleep=clock.sleep, clock=clock, **kwargs
    )


def test_initial_state_pending(clock):
    """Test a not-done operation starts PENDING"""
    op = make(pending(), MagicMock(), clock)

    assert op.state is OperationState.PENDING
    assert op.done is False
    assert op.error is None
    assert op.metadata == {"operationType": "CREATE_ENTITLEMENT"}


def test_result_after_polling(clock):
    """Test result() polls until done and returns the exact resource"""
    refresh = MagicMock(side_effect=[pending(), pending(), succeeded()])
    op = make(pending(), refresh, clock)

    result = op.result()

    assert result == ENTITLEMENT
    assert op.state is OperationState.SUCCEEDED
    assert refresh.call_count == 3
    refresh.assert_called_with(OPERATION_NAME)
    assert len(clock.sleeps) == 2


def test_result_strips_type_marker(clock):
    """Test the @type marker is not part of the returned resource"""
    op = make(succeeded(), MagicMock(), clock)

    assert "@type" not in op.result()


def test_already_done_does_not_poll(clock):
    """Test a done operation returns without remote calls"""
    refresh = MagicMock()
    op = make(succeeded(), refresh, clock)

    assert op.result() == ENTITLEMENT
    refresh.assert_not_called()
    assert clock.sleeps == []


def test_failed_operation_raises(clock):
    """Test a failed operation raises instead of returning a resource"""
    refresh = MagicMock(side_effect=[failed()])
    op = make(pending(), refresh, clock, description="Entitlement creation")

    with pytest.raises(OperationFailedException) as exc_info:
        op.result()

    assert op.state is OperationState.FAILED
    assert op.error == {"code": 6, "message": "Entitlement already exists"}
    assert exc_info.value.operation_name == OPERATION_NAME
    assert exc_info.value.code == 6
    assert exc_info.value.status is None
    assert "Entitlement already exists" in str(exc_info.value)


def test_terminal_state_is_sticky(clock):
    """Test poll() does not refresh once terminal"""
    refresh = MagicMock(side_effect=[failed()])
    op = make(pending(), refresh, clock)

    assert op.poll() is OperationState.FAILED
    assert op.poll() is OperationState.FAILED
    assert refresh.call_count == 1


def test_poll_interval_grows_and_is_capped(clock):
    """Test polling backs off up to the maximum interval"""
    responses = [pending()] * 12 + [succeeded()]
    op = make(pending(), MagicMock(side_effect=responses), clock, poll_interval=1.0)

    op.result()

    assert clock.sleeps[0] == 1.0
    assert clock.sleeps[1] == 1.5
    assert clock.sleeps == sorted(clock.sleeps)
    assert max(clock.sleeps) == MAX_POLL_INTERVAL


def test_timeout(clock):
    """Test waiting stops with OperationTimeoutException"""
    refresh = MagicMock(return_value=pending())
    op = make(pending(), refresh, clock, poll_interval=2.0)

    with pytest.raises(OperationTimeoutException) as exc_info:
        op.result(timeout=5)

    assert exc_info.value.timeout == 5
    assert clock.now == pytest.approx(5)
    assert op.state is OperationState.PENDING


def test_remote_error_while_polling_propagates(clock):
    """Test errors from the refresh call are not swallowed"""
    refresh = MagicMock(side_effect=RuntimeError("boom"))
    op = make(pending(), refresh, clock)

    with pytest.raises(RuntimeError):
        op.result()
