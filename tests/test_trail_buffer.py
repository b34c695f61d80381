import pytest

from threebody.data_models import TrailBuffer


def _points(n, start=0):
    return [(float(i), float(-i), float(2 * i)) for i in range(start, start + n)]


def test_new_buffer_is_empty():
    trail = TrailBuffer(4)
    assert trail.capacity == 4
    assert trail.count == 0
    assert trail.write_index == 0
    assert trail.read() == []


@pytest.mark.parametrize("capacity", [0, -3])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ValueError):
        TrailBuffer(capacity)


def test_partial_fill_reads_in_order():
    trail = TrailBuffer(5)
    for p in _points(3):
        trail.append(p)
    assert trail.count == 3
    assert trail.write_index == 3
    assert trail.read() == _points(3)


def test_exactly_full_reads_from_slot_zero():
    trail = TrailBuffer(4)
    for p in _points(4):
        trail.append(p)
    assert trail.write_index == 0
    assert trail.read() == _points(4)


def test_wrap_keeps_newest_capacity_points():
    trail = TrailBuffer(4)
    for p in _points(7):
        trail.append(p)
    assert trail.count == 4
    assert trail.write_index == 3
    assert trail.read() == _points(4, start=3)


def test_read_is_idempotent_and_iteration_restarts():
    trail = TrailBuffer(3)
    for p in _points(5):
        trail.append(p)
    first = trail.read()
    assert trail.read() == first
    assert list(trail) == first
    assert list(trail) == first
    assert trail.count == 3


def test_clear_resets_cursor_and_count():
    trail = TrailBuffer(3)
    for p in _points(5):
        trail.append(p)
    trail.clear()
    assert len(trail) == 0
    assert trail.write_index == 0
    assert trail.read() == []
    trail.append((1.0, 2.0, 3.0))
    assert trail.read() == [(1.0, 2.0, 3.0)]
