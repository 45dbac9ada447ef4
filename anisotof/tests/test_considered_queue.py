import numpy as np
import pytest

from anisotof.core.considered import ConsideredQueue


def test_pop_order_is_ascending():
    q = ConsideredQueue(5)
    for value, cell in [(3.0, 0), (1.0, 1), (2.5, 2), (0.5, 3)]:
        q.push(value, cell)
    assert len(q) == 4
    assert q.peek_min() == (0.5, 3)
    popped = [q.pop_min() for _ in range(4)]
    assert popped == [(0.5, 3), (1.0, 1), (2.5, 2), (3.0, 0)]
    assert not q


def test_equal_values_break_ties_by_lowest_cell():
    q = ConsideredQueue(10)
    for cell in [7, 2, 9, 4]:
        q.push(1.0, cell)
    assert [q.pop_min()[1] for _ in range(4)] == [2, 4, 7, 9]


def test_push_twice_is_rejected():
    q = ConsideredQueue(3)
    q.push(1.0, 1)
    with pytest.raises(ValueError):
        q.push(0.5, 1)


def test_push_out_of_range_is_rejected():
    q = ConsideredQueue(3)
    with pytest.raises(ValueError):
        q.push(1.0, 3)


def test_empty_queue_peek_and_pop_raise():
    q = ConsideredQueue(2)
    with pytest.raises(IndexError):
        q.peek_min()
    with pytest.raises(IndexError):
        q.pop_min()


def test_decrease_key_moves_entry_to_front():
    q = ConsideredQueue(4)
    q.push(1.0, 0)
    q.push(2.0, 1)
    q.push(3.0, 2)
    q.decrease_key(2, 0.25)
    assert q.peek_min() == (0.25, 2)
    assert q.value(2) == 0.25
    # equal value is allowed and changes nothing
    q.decrease_key(1, 2.0)
    assert [q.pop_min() for _ in range(3)] == [(0.25, 2), (1.0, 0), (2.0, 1)]


def test_decrease_key_rejects_larger_value():
    q = ConsideredQueue(2)
    q.push(1.0, 0)
    with pytest.raises(ValueError):
        q.decrease_key(0, 1.5)
    assert q.value(0) == 1.0


def test_decrease_key_unknown_cell():
    q = ConsideredQueue(3)
    q.push(1.0, 0)
    with pytest.raises(KeyError):
        q.decrease_key(2, 0.5)
    with pytest.raises(KeyError):
        q.value(2)


def test_handle_released_after_pop():
    q = ConsideredQueue(3)
    q.push(1.0, 1)
    assert 1 in q
    q.pop_min()
    assert 1 not in q
    # the cell may be queued again once released
    q.push(4.0, 1)
    assert q.peek_min() == (4.0, 1)


def test_cells_snapshot_and_clear():
    q = ConsideredQueue(6)
    for cell in [5, 0, 3]:
        q.push(float(cell), cell)
    assert sorted(q.cells().tolist()) == [0, 3, 5]
    q.clear()
    assert len(q) == 0
    assert all(c not in q for c in range(6))


def test_random_operations_match_sorted_reference():
    rng = np.random.RandomState(0)
    n = 200
    q = ConsideredQueue(n)
    ref = {}
    for cell in range(n):
        v = float(rng.rand())
        q.push(v, cell)
        ref[cell] = v
    for cell in rng.choice(n, size=80, replace=False):
        v = ref[int(cell)] * float(rng.rand())
        q.decrease_key(int(cell), v)
        ref[int(cell)] = v
    expected = sorted((v, c) for c, v in ref.items())
    got = [q.pop_min() for _ in range(n)]
    assert got == expected
