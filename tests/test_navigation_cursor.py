"""Bounds handling of the navigation cursor."""

import pytest

from assessment_engine.core.errors import OutOfRangeError
from assessment_engine.core.services.navigation_cursor import NavigationCursor


def test_next_stops_at_last_question():
    cursor = NavigationCursor(3)
    assert cursor.next() == 1
    assert cursor.next() == 2
    assert cursor.next() == 2
    assert cursor.is_last()


def test_previous_stops_at_first_question():
    cursor = NavigationCursor(3)
    assert cursor.previous() == 0
    cursor.jump_to(2)
    assert cursor.previous() == 1
    assert not cursor.is_first()


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_jump_outside_range_fails(index):
    cursor = NavigationCursor(3)
    cursor.jump_to(1)

    with pytest.raises(OutOfRangeError):
        cursor.jump_to(index)
    assert cursor.current_index == 1


def test_out_of_range_is_an_index_error():
    with pytest.raises(IndexError):
        NavigationCursor(1).jump_to(1)


def test_requires_at_least_one_question():
    with pytest.raises(ValueError):
        NavigationCursor(0)
