"""
Quiz attempt state machine.

An attempt walks one user through the questions of a :class:`Quiz` in order.
Every transition is applied in memory and written through a ``QuizStore``;
finishing the last question grades the quiz exactly once and sends one
award to the ``Rewards`` collaborator.

Two write policies are supported:

* ``optimistic``: the transition is applied first, a failing write is only
  logged. The stored record may lag behind what the user saw.
* ``confirmed``: the write goes first and a failure raises
  :class:`PersistenceError`, leaving the attempt untouched.
"""
import enum
import logging
import math
from typing import List, Literal, Optional, Protocol

from ..domain.model import UNANSWERED, Question, Quiz

logger = logging.getLogger(__name__)

PersistencePolicy = Literal["optimistic", "confirmed"]

POINTS_PER_SCORE_PERCENT = 2.5


class QuizStore(Protocol):
    def update_quiz_fields(self, quiz_id: str, fields: dict) -> None: ...


class Rewards(Protocol):
    def award(self, amount: int, reason: str) -> None: ...


class AttemptState(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class InvalidTransition(Exception):
    """Raised when an event is not allowed in the attempt's current state."""


class PersistenceError(RuntimeError):
    """Raised under the confirmed policy when a progress write fails."""


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_score(questions: List[Question], answers: List[int]) -> float:
    correct = sum(1 for q, a in zip(questions, answers) if a == q.correct_answer)
    return 100 * correct / len(questions)


def points_for_score(score: float) -> int:
    return round_half_up(score * POINTS_PER_SCORE_PERCENT)


class QuizAttempt:
    def __init__(
        self,
        quiz: Quiz,
        store: QuizStore,
        rewards: Rewards,
        policy: PersistencePolicy = "optimistic",
    ) -> None:
        if not quiz.questions:
            raise ValueError(f"Quiz {quiz.id} has no questions")
        self.quiz = quiz
        self.store = store
        self.rewards = rewards
        self.policy = policy

        n = len(quiz.questions)
        answers = list(quiz.user_answers) if quiz.user_answers else []
        if len(answers) != n:
            # resize anything stale to the question count
            answers = (answers + [UNANSWERED] * n)[:n]
        self.user_answers: List[int] = answers
        self.current_index: int = min(max(quiz.current_index or 0, 0), n - 1)
        self.score: Optional[float] = quiz.score
        self.state = AttemptState.COMPLETED if quiz.completed else AttemptState.IN_PROGRESS

    @property
    def completed(self) -> bool:
        return self.state is AttemptState.COMPLETED

    @property
    def current_question(self) -> Optional[Question]:
        if self.completed:
            return None
        return self.quiz.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.quiz.questions) - 1

    def can_advance(self) -> bool:
        return not self.completed and self.user_answers[self.current_index] != UNANSWERED

    def select_answer(self, question_index: int, option_index: int) -> None:
        if self.completed:
            raise InvalidTransition("Quiz is already completed")
        if question_index != self.current_index:
            raise InvalidTransition(
                f"Question {question_index} is not the current question ({self.current_index})"
            )
        options = self.quiz.questions[question_index].options
        if not 0 <= option_index < len(options):
            raise InvalidTransition(f"Option {option_index} is out of range 0..{len(options) - 1}")

        answers = list(self.user_answers)
        answers[question_index] = option_index
        self._commit({"user_answers": answers}, user_answers=answers)

    def advance(self) -> bool:
        """Moves to the next question or grades the quiz. Returns False when refused."""
        if not self.can_advance():
            return False

        if not self.is_last_question:
            next_index = self.current_index + 1
            self._commit({"current_index": next_index}, current_index=next_index)
            return True

        score = compute_score(self.quiz.questions, self.user_answers)
        answers = list(self.user_answers)
        saved = self._commit(
            {"completed": True, "score": score, "user_answers": answers},
            state=AttemptState.COMPLETED,
            score=score,
        )
        if not saved:
            # the stored record is still in progress and will be graded again
            logger.warning("Quiz %s completion not saved; award deferred", self.quiz.id)
            return True
        logger.info("Quiz %s completed with score %.1f", self.quiz.id, score)
        self.rewards.award(points_for_score(score), f"Assessment Mastered: {round_half_up(score)}%")
        return True

    def suspend(self) -> None:
        if self.completed:
            raise InvalidTransition("Only an in-progress quiz can be suspended")
        logger.debug("Quiz %s suspended at question %d", self.quiz.id, self.current_index)

    def _commit(self, fields: dict, **changes) -> bool:
        """Applies ``changes`` and writes ``fields``. Returns whether the write landed."""
        if self.policy == "confirmed":
            try:
                self.store.update_quiz_fields(self.quiz.id, fields)
            except Exception as e:
                raise PersistenceError(f"Could not save progress for quiz {self.quiz.id}") from e
            self._apply(changes)
            return True

        self._apply(changes)
        try:
            self.store.update_quiz_fields(self.quiz.id, fields)
        except Exception:
            logger.exception("Saving progress for quiz %s failed; keeping local state", self.quiz.id)
            return False
        return True

    def _apply(self, changes: dict) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
