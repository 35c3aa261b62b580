"""Service holding the per-question answer sets of an attempt."""

from __future__ import annotations

import logging

from assessment_engine.core.errors import MutationAfterSubmitError
from assessment_engine.core.models import QuestionType

logger = logging.getLogger(__name__)


class AnswerStore:
    """Maps question ids to selected option ids.

    Only questions with at least one selection have a key. Once frozen, every
    mutation is rejected until the store is unfrozen again.
    """

    def __init__(self) -> None:
        self._answers: dict[str, set[str]] = {}
        self._frozen: bool = False

    def select(self, question_id: str, option_id: str, question_type: QuestionType) -> None:
        """Apply a selection using the question type's mutation rule."""
        if self._frozen:
            logger.debug("Rejected selection of %s for %s: answers are frozen", option_id, question_id)
            raise MutationAfterSubmitError(
                f"Answers are frozen; cannot select '{option_id}' for question '{question_id}'."
            )

        if question_type is QuestionType.MULTI_SELECT:
            selected = self._answers.get(question_id, set())
            if option_id in selected:
                selected = selected - {option_id}
            else:
                selected = selected | {option_id}
        else:
            selected = {option_id}

        if selected:
            self._answers[question_id] = selected
        else:
            self._answers.pop(question_id, None)

    def answered_count(self) -> int:
        return len(self._answers)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self._answers

    def selected(self, question_id: str) -> frozenset[str]:
        return frozenset(self._answers.get(question_id, ()))

    def snapshot(self) -> dict[str, list[str]]:
        """Return a detached copy suitable for submission."""
        return {question_id: sorted(options) for question_id, options in self._answers.items()}

    def freeze(self) -> None:
        self._frozen = True

    def unfreeze(self) -> None:
        self._frozen = False

    def is_frozen(self) -> bool:
        return self._frozen
