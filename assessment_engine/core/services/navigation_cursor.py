"""Service tracking which question of the attempt is displayed."""

from __future__ import annotations

from assessment_engine.core.errors import OutOfRangeError


class NavigationCursor:
    """Bounds-checked index into a fixed-length question sequence."""

    def __init__(self, question_count: int) -> None:
        if question_count <= 0:
            raise ValueError("Navigation requires at least one question.")
        self._question_count = question_count
        self._index: int = 0

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def question_count(self) -> int:
        return self._question_count

    def next(self) -> int:
        """Advance one question; stays put on the last question."""
        if self._index < self._question_count - 1:
            self._index += 1
        return self._index

    def previous(self) -> int:
        """Go back one question; stays put on the first question."""
        if self._index > 0:
            self._index -= 1
        return self._index

    def jump_to(self, index: int) -> int:
        if not 0 <= index < self._question_count:
            raise OutOfRangeError(f"Question index {index} out of range")
        self._index = index
        return self._index

    def is_first(self) -> bool:
        return self._index == 0

    def is_last(self) -> bool:
        return self._index == self._question_count - 1
