import pytest

from slotledger.backends.polars.ledger import PolarsJournal
from slotledger.core.config import ContractConfig
from slotledger.core.contract import AccumulatorContract
from slotledger.core.gate import GateState
from slotledger.core.names import MAX_BLOCK_HEIGHT, ErrorKind, Namespace


class FailingJournal(PolarsJournal):
    """Accepts ``fail_after`` rows, then raises on every append."""

    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after

    def append(self, **row):
        if len(self) >= self.fail_after:
            raise OSError("journal storage unavailable")
        return super().append(**row)


@pytest.fixture
def contract():
    return AccumulatorContract("ST1.accumulator", journal=PolarsJournal())


def test_set_values_before_initialize_is_not_authorized(contract):
    r = contract.set_values([1, 2, 3], caller="ST2", current_height=1)
    assert r.error_kind is ErrorKind.NOT_AUTHORIZED
    assert contract.state().slots == {}


def test_initialize_then_set_values(contract):
    assert contract.initialize("ST1", 1).is_ok
    assert contract.set_values([1, 2, 3], "ST2", 2).is_ok
    assert [contract.get_value(h) for h in (2, 3, 4, 5)] == [1, 2, 3, None]
    assert contract.state().gate is GateState.INITIALIZED


def test_reinitialize_keeps_state(contract):
    contract.initialize("ST1", 1)
    contract.set_values([3], "ST2", 2)
    before = contract.state()

    r = contract.initialize("ST1", 3)

    assert r.error_kind is ErrorKind.NOT_AUTHORIZED
    assert contract.state() == before


def test_invalid_arguments_raise_before_gate(contract):
    with pytest.raises(ValueError):
        contract.set_values([-1], "ST2", 1)
    with pytest.raises(TypeError):
        contract.set_values([1], "ST2", "2")
    assert contract.journal.count() == 0


def test_values_above_configured_bound_are_rejected():
    contract = AccumulatorContract("ST1.small", config=ContractConfig(max_value=255))
    contract.initialize("ST1")
    with pytest.raises(ValueError):
        contract.set_values([256], "ST1", 1)


def test_overflow_against_configured_bound():
    contract = AccumulatorContract("ST1.small", config=ContractConfig(max_value=255))
    contract.initialize("ST1")
    contract.set_values([200, 200], "ST1", 1)

    r = contract.set_values([55, 56], "ST1", 1)

    assert r.error_kind is ErrorKind.OVERFLOW
    assert contract.state().slots == {1: 200, 2: 200}


def test_journal_records_transitions(contract):
    contract.set_values([9], "ST2", 1)
    contract.initialize("ST1", 1)
    contract.set_values([1, 2], "ST2", 2)

    journal = contract.journal
    assert journal.count(namespace=Namespace.GATE) == 1
    assert journal.count(namespace=Namespace.SLOTS) == 2
    assert journal.count(namespace=Namespace.CALLS, kind="err") == 1
    assert journal.count(namespace=Namespace.CALLS, kind="ok") == 2

    merge = journal.latest(namespace=Namespace.SLOTS).payload
    assert (merge.height, merge.contribution, merge.total) == (3, 2, 2)
    rejected = journal.latest(namespace=Namespace.CALLS, kind="err")
    assert rejected.payload["result"] == int(ErrorKind.NOT_AUTHORIZED)
    assert rejected.sender == "ST2"


def test_empty_set_values_writes_no_slot_rows(contract):
    contract.initialize("ST1", 1)
    assert contract.set_values([], "ST1", 2).is_ok
    assert contract.journal.count(namespace=Namespace.SLOTS) == 0


def test_dispatch(contract):
    contract.call_public("initialize", (), "ST1", 1).expect_ok().expect_bool(True)
    contract.call_public("set-values", ([4, 5],), "ST1", 3)
    contract.call_read_only("get-value", (4,)).expect_some().expect_uint(5)
    contract.call_read_only("get-value", (5,)).expect_none()
    with pytest.raises(AttributeError):
        contract.call_public("get-value", (1,), "ST1", 1)
    with pytest.raises(AttributeError):
        contract.call_read_only("initialize", ())
    with pytest.raises(TypeError):
        contract.call_public("set-values", (), "ST1", 1)


def test_contract_without_journal():
    contract = AccumulatorContract("ST1.nojournal")
    contract.initialize("ST1")
    assert contract.set_values([1], "ST1", 0).is_ok
    assert contract.get_value(0) == 1


@pytest.mark.parametrize("fail_after", [2, 3, 4])
def test_journal_failure_leaves_slots_untouched(fail_after):
    # rows so far: gate + initialize call; set_values writes 2 merges then its call
    contract = AccumulatorContract("ST1.acc", journal=FailingJournal(fail_after))
    contract.initialize("ST1", 1)
    before = contract.state()

    with pytest.raises(OSError):
        contract.set_values([1, 2], "ST2", 2)

    assert contract.state() == before
    assert contract.get_value(2) is None


@pytest.mark.parametrize("fail_after", [0, 1])
def test_journal_failure_keeps_gate_closed(fail_after):
    contract = AccumulatorContract("ST1.acc", journal=FailingJournal(fail_after))

    with pytest.raises(OSError):
        contract.initialize("ST1", 1)

    assert contract.state().gate is GateState.UNINITIALIZED
    assert not contract.initialized


def test_heights_beyond_journal_range_are_argument_errors(contract):
    contract.initialize("ST1", 1)
    rows = contract.journal.count()

    with pytest.raises(ValueError):
        contract.set_values([1], "ST2", MAX_BLOCK_HEIGHT + 1)
    with pytest.raises(ValueError):
        contract.set_values([1, 2], "ST2", MAX_BLOCK_HEIGHT)
    with pytest.raises(ValueError):
        contract.get_value(1 << 63)

    assert contract.state().slots == {}
    assert contract.journal.count() == rows


def test_last_addressable_height(contract):
    contract.initialize("ST1", 1)
    assert contract.set_values([7], "ST2", MAX_BLOCK_HEIGHT).is_ok
    assert contract.get_value(MAX_BLOCK_HEIGHT) == 7
    assert contract.journal.latest(namespace=Namespace.SLOTS).block_height == MAX_BLOCK_HEIGHT
