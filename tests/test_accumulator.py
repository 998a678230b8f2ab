import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from slotledger.core.accumulator import (
    ScheduledAccumulatorLedger,
    validate_height,
    validate_values,
)
from slotledger.core.errors import ValueOverflowError
from slotledger.core.names import MAX_BLOCK_HEIGHT, U128_MAX


def test_absent_slot_is_none():
    acc = ScheduledAccumulatorLedger()
    assert acc.get(0) is None
    assert len(acc) == 0


def test_merge_schedules_forward():
    acc = ScheduledAccumulatorLedger()
    acc.merge([1, 2, 3], current_height=10)
    assert acc.snapshot() == {10: 1, 11: 2, 12: 3}
    assert acc.get(13) is None


def test_merge_only_touches_submission_range():
    acc = ScheduledAccumulatorLedger()
    acc.merge([4, 4], current_height=3)
    merges = acc.merge([1, 1, 1, 1], current_height=7)
    assert [m.height for m in merges] == [7, 8, 9, 10]
    assert acc.heights() == [3, 4, 7, 8, 9, 10]


def test_cross_block_overlap_is_triangular():
    acc = ScheduledAccumulatorLedger()
    for h in (2, 3, 4):
        acc.merge([1, 2, 3], current_height=h)
    assert acc.snapshot() == {2: 1, 3: 3, 4: 6, 5: 5, 6: 3}


def test_planned_merge_reports_previous_and_total():
    acc = ScheduledAccumulatorLedger()
    acc.merge([5], current_height=1)
    (m,) = acc.plan([2], current_height=1)
    assert (m.previous, m.contribution, m.total) == (5, 2, 7)
    assert acc.get(1) == 5  # plan does not commit


def test_overflow_raises_before_anything_is_committed():
    acc = ScheduledAccumulatorLedger(max_value=10)
    acc.merge([0, 9], current_height=0)

    with pytest.raises(ValueOverflowError) as exc:
        acc.merge([3, 2], current_height=0)

    assert exc.value.height == 1
    assert acc.snapshot() == {0: 0, 1: 9}


def test_u128_bound_is_inclusive():
    acc = ScheduledAccumulatorLedger()
    acc.merge([U128_MAX - 1], current_height=0)
    acc.merge([1], current_height=0)
    assert acc.get(0) == U128_MAX
    with pytest.raises(ValueOverflowError):
        acc.merge([1], current_height=0)


@pytest.mark.parametrize("bad", [[-1], [1.5], [True], ["3"], [U128_MAX + 1]])
def test_validate_values_rejects_outside_domain(bad):
    with pytest.raises((TypeError, ValueError)):
        validate_values(bad)


def test_validate_height():
    assert validate_height(0) == 0
    with pytest.raises(ValueError):
        validate_height(-1)
    with pytest.raises(TypeError):
        validate_height("1")


def test_validate_height_bounds_the_touched_range():
    assert validate_height(MAX_BLOCK_HEIGHT) == MAX_BLOCK_HEIGHT
    assert validate_height(MAX_BLOCK_HEIGHT - 2, span=3) == MAX_BLOCK_HEIGHT - 2
    assert validate_height(MAX_BLOCK_HEIGHT, span=0) == MAX_BLOCK_HEIGHT
    with pytest.raises(ValueError):
        validate_height(MAX_BLOCK_HEIGHT + 1)
    with pytest.raises(ValueError):
        validate_height(MAX_BLOCK_HEIGHT - 1, span=3)


submissions = st.lists(
    st.lists(st.integers(min_value=0, max_value=1000), max_size=8), max_size=8
)


@settings(max_examples=50)
@given(data=st.data(), calls=submissions, height=st.integers(min_value=0, max_value=50))
def test_same_height_merges_commute(data, calls, height):
    reordered = data.draw(st.permutations(calls))
    a = ScheduledAccumulatorLedger()
    b = ScheduledAccumulatorLedger()
    for values in calls:
        a.merge(values, height)
    for values in reordered:
        b.merge(values, height)
    assert a.snapshot() == b.snapshot()


@settings(max_examples=50)
@given(calls=submissions, height=st.integers(min_value=0, max_value=50))
def test_slot_is_sum_of_contributions(calls, height):
    acc = ScheduledAccumulatorLedger()
    expected = {}
    for values in calls:
        acc.merge(values, height)
        for i, v in enumerate(values):
            expected[height + i] = expected.get(height + i, 0) + v
    assert acc.snapshot() == expected
