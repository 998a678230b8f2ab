import pytest

from slotledger.core.errors import NotAuthorizedError
from slotledger.core.gate import GateState, InitGate
from slotledger.core.names import ErrorKind


def test_starts_uninitialized():
    gate = InitGate()
    assert gate.state is GateState.UNINITIALIZED
    assert not gate.initialized


def test_initialize_flips_once():
    gate = InitGate()
    assert gate.initialize("ST1") is True
    assert gate.state is GateState.INITIALIZED


def test_second_initialize_raises_not_authorized():
    gate = InitGate()
    gate.initialize("ST1")

    with pytest.raises(NotAuthorizedError) as exc:
        gate.initialize("ST1")

    assert exc.value.kind is ErrorKind.NOT_AUTHORIZED
    assert gate.initialized


def test_require_initialized_guards_writes():
    gate = InitGate()
    with pytest.raises(NotAuthorizedError):
        gate.require_initialized()
    gate.initialize()
    gate.require_initialized()


def test_gate_ignores_caller_identity():
    gate = InitGate()
    gate.initialize(None)
    with pytest.raises(NotAuthorizedError):
        gate.initialize("ST-someone-else")


def test_require_uninitialized_does_not_flip():
    gate = InitGate()
    gate.require_uninitialized()
    assert gate.state is GateState.UNINITIALIZED
    gate.initialize()
    with pytest.raises(NotAuthorizedError) as exc:
        gate.require_uninitialized()
    assert exc.value.kind is ErrorKind.NOT_AUTHORIZED
