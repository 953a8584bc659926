import logging

import pytest

from pharmnexus.domain.model import UNANSWERED, quiz_from_row
from pharmnexus.services.quiz_attempt import (
    AttemptState,
    InvalidTransition,
    PersistenceError,
    QuizAttempt,
    compute_score,
    points_for_score,
    round_half_up,
)


class RecordingRewards:
    def __init__(self) -> None:
        self.awards: list[tuple[int, str]] = []

    def award(self, amount, reason):
        self.awards.append((amount, reason))


@pytest.fixture
def rewards():
    return RecordingRewards()


def open_attempt(quiz_repo, rewards, row, policy="optimistic"):
    quiz_repo.add(row)
    return QuizAttempt(quiz_from_row(quiz_repo.get_quiz(row["id"])), quiz_repo, rewards, policy=policy)


def test_fresh_quiz_starts_at_first_question(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    assert attempt.state is AttemptState.IN_PROGRESS
    assert attempt.current_index == 0
    assert attempt.user_answers == [UNANSWERED] * 4
    assert attempt.current_question.question == "Question 1?"


def test_resume_restores_progress(quiz_repo, rewards, quiz_row):
    row = quiz_row(current_index=2, user_answers=[0, 1, -1, -1])
    attempt = open_attempt(quiz_repo, rewards, row)
    assert attempt.current_index == 2
    assert attempt.user_answers == [0, 1, -1, -1]
    assert attempt.state is AttemptState.IN_PROGRESS


def test_completed_quiz_opens_read_only(quiz_repo, rewards, quiz_row):
    row = quiz_row(completed=True, score=75.0, user_answers=[0, 1, 2, 0], current_index=3)
    attempt = open_attempt(quiz_repo, rewards, row)
    assert attempt.completed
    assert attempt.score == 75.0
    assert attempt.user_answers == [0, 1, 2, 0]
    assert attempt.current_question is None
    with pytest.raises(InvalidTransition):
        attempt.select_answer(3, 1)
    assert attempt.advance() is False
    with pytest.raises(InvalidTransition):
        attempt.suspend()
    assert quiz_repo.updates == []


def test_select_answer_persists_without_advancing(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    attempt.select_answer(0, 2)
    assert attempt.current_index == 0
    assert attempt.user_answers == [2, -1, -1, -1]
    assert quiz_repo.updates == [("quiz-1", {"user_answers": [2, -1, -1, -1]})]
    assert rewards.awards == []


def test_select_answer_rejects_other_question(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    with pytest.raises(InvalidTransition):
        attempt.select_answer(1, 0)
    assert attempt.user_answers == [UNANSWERED] * 4


@pytest.mark.parametrize("option", [-1, 4, 10])
def test_select_answer_rejects_out_of_range_option(quiz_repo, rewards, quiz_row, option):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    with pytest.raises(InvalidTransition):
        attempt.select_answer(0, option)
    assert quiz_repo.updates == []


def test_advance_without_answer_is_a_noop(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    assert attempt.advance() is False
    assert attempt.current_index == 0
    assert attempt.user_answers == [UNANSWERED] * 4
    assert quiz_repo.updates == []


def test_advance_moves_to_next_question(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    attempt.select_answer(0, 0)
    assert attempt.advance() is True
    assert attempt.current_index == 1
    assert quiz_repo.updates[-1] == ("quiz-1", {"current_index": 1})
    assert quiz_repo.rows["quiz-1"]["completed"] is False


def test_only_latest_answer_counts(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(1,)))
    attempt.select_answer(0, 1)
    attempt.select_answer(0, 3)
    attempt.advance()
    assert attempt.completed
    assert attempt.score == 0


def test_two_of_four_correct_scores_fifty(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(0, 1, 2, 3)))
    for index, option in enumerate([0, 0, 2, 0]):
        attempt.select_answer(index, option)
        attempt.advance()
    assert attempt.state is AttemptState.COMPLETED
    assert attempt.score == 50
    assert rewards.awards == [(125, "Assessment Mastered: 50%")]


def test_completion_is_written_in_one_update(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(2,)))
    attempt.select_answer(0, 2)
    attempt.advance()
    assert quiz_repo.updates[-1] == (
        "quiz-1",
        {"completed": True, "score": 100.0, "user_answers": [2]},
    )
    completing = [fields for _, fields in quiz_repo.updates if fields.get("completed")]
    assert len(completing) == 1
    assert rewards.awards == [(250, "Assessment Mastered: 100%")]


@pytest.mark.parametrize("n", [1, 3, 7])
def test_n_advances_complete_the_quiz(quiz_repo, rewards, quiz_row, n):
    correct = tuple(i % 4 for i in range(n))
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=correct))
    answers = [0] * n
    for i in range(n):
        assert not attempt.completed
        attempt.select_answer(i, answers[i])
        assert attempt.advance() is True
    assert attempt.completed
    expected = 100 * sum(1 for a, c in zip(answers, correct) if a == c) / n
    assert attempt.score == expected
    assert len(rewards.awards) == 1


def test_advance_after_completion_does_nothing(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(0,)))
    attempt.select_answer(0, 0)
    attempt.advance()
    writes = len(quiz_repo.updates)
    assert attempt.advance() is False
    assert len(quiz_repo.updates) == writes
    assert len(rewards.awards) == 1


def test_suspend_changes_nothing(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(current_index=1, user_answers=[0, 2, -1, -1]))
    attempt.suspend()
    assert attempt.current_index == 1
    assert attempt.user_answers == [0, 2, -1, -1]
    assert attempt.state is AttemptState.IN_PROGRESS
    assert quiz_repo.updates == []


def test_optimistic_policy_keeps_local_state_on_write_failure(quiz_repo, rewards, quiz_row, caplog):
    attempt = open_attempt(quiz_repo, rewards, quiz_row())
    quiz_repo.fail_updates = True
    with caplog.at_level(logging.ERROR):
        attempt.select_answer(0, 1)
        assert attempt.advance() is True
    assert attempt.user_answers[0] == 1
    assert attempt.current_index == 1
    assert "keeping local state" in caplog.text


def test_confirmed_policy_refuses_transition_on_write_failure(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(0,)), policy="confirmed")
    attempt.select_answer(0, 0)
    quiz_repo.fail_updates = True
    with pytest.raises(PersistenceError):
        attempt.advance()
    assert not attempt.completed
    assert attempt.score is None
    assert rewards.awards == []


def test_short_answer_list_is_padded(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(user_answers=[1]))
    assert attempt.user_answers == [1, -1, -1, -1]


def test_quiz_without_questions_is_rejected(quiz_repo, rewards, quiz_row):
    row = quiz_row()
    row["questions"] = []
    with pytest.raises(ValueError):
        open_attempt(quiz_repo, rewards, row)


def test_scoring_helpers():
    assert round_half_up(62.5) == 63
    assert round_half_up(62.4) == 62
    assert points_for_score(25.0) == 63
    assert points_for_score(0) == 0
    quiz = quiz_from_row(
        {"id": "q", "title": "t", "questions": [
            {"question": "a", "options": ["1", "2"], "correctAnswer": 1},
            {"question": "b", "options": ["1", "2"], "correctAnswer": 0},
            {"question": "c", "options": ["1", "2"], "correctAnswer": 0},
        ]}
    )
    assert compute_score(quiz.questions, [1, 1, -1]) == pytest.approx(100 / 3)


def test_failed_completion_write_defers_award(quiz_repo, rewards, quiz_row):
    attempt = open_attempt(quiz_repo, rewards, quiz_row(correct=(0,)))
    attempt.select_answer(0, 0)
    quiz_repo.fail_updates = True
    assert attempt.advance() is True
    assert attempt.completed
    assert rewards.awards == []
    assert quiz_repo.rows["quiz-1"]["completed"] is False

    # reopened from storage, the quiz is graded again and paid once
    quiz_repo.fail_updates = False
    retry = QuizAttempt(quiz_from_row(quiz_repo.get_quiz("quiz-1")), quiz_repo, rewards)
    assert retry.advance() is True
    assert quiz_repo.rows["quiz-1"]["completed"] is True
    assert rewards.awards == [(250, "Assessment Mastered: 100%")]
