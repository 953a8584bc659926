from typing import List, Literal, Optional

from .dates import default_deadline, to_iso
from .quiz_attempt import PersistencePolicy, QuizAttempt
from .rewards import NoRewards, RewardsService
from ..domain.model import Question, Quiz, question_to_json, quiz_from_row
from ..repositories.profile_repository import ProfileRepository
from ..repositories.quiz_repository import QuizRepository

QuizStatus = Literal["pending", "completed"]


def _question_out(q: Question) -> dict:
    return {
        "question": q.question,
        "options": q.options,
        "correctAnswer": q.correct_answer,
        "explanation": q.explanation,
        "category": q.category,
    }


def option_label(index: int) -> str:
    return chr(ord("A") + index)


class QuizService:
    def __init__(
        self,
        repo: QuizRepository,
        profiles: ProfileRepository,
        policy: PersistencePolicy = "optimistic",
    ) -> None:
        self.repo = repo
        self.profiles = profiles
        self.policy = policy

    def list_quizzes(self, user_id: str, status: Optional[QuizStatus] = None) -> list[dict]:
        completed = None if status is None else status == "completed"
        items = self.repo.list_quizzes(user_id, completed)
        return [
            {
                "id": str(i["id"]),
                "title": i["title"],
                "courseId": i.get("course_id"),
                "questionCount": len(i.get("questions") or []),
                "deadline": i.get("deadline"),
                "completed": bool(i.get("completed")),
                "score": i.get("score"),
                "currentIndex": i.get("current_index") or 0,
                "createdAt": to_iso(i.get("created_at")),
            }
            for i in items
        ]

    def load_quiz(self, quiz_id: str) -> Optional[Quiz]:
        row = self.repo.get_quiz(quiz_id)
        if not row:
            return None
        return quiz_from_row(row)

    def get_quiz(self, quiz_id: str) -> Optional[dict]:
        quiz = self.load_quiz(quiz_id)
        if quiz is None:
            return None
        return {
            "id": quiz.id,
            "title": quiz.title,
            "userId": quiz.user_id,
            "courseId": quiz.course_id,
            "materialId": quiz.material_id,
            "deadline": quiz.deadline,
            "completed": quiz.completed,
            "score": quiz.score,
            "createdAt": to_iso(quiz.created_at),
            "questions": [_question_out(q) for q in quiz.questions],
        }

    def create_quiz(
        self,
        user_id: str,
        course_id: str,
        title: str,
        questions: List[Question],
        deadline: Optional[str] = None,
        material_id: Optional[str] = None,
    ) -> str:
        row = {
            "user_id": user_id,
            "course_id": course_id,
            "title": title,
            "questions": [question_to_json(q) for q in questions],
            "deadline": deadline or default_deadline(),
            "completed": False,
        }
        if material_id is not None:
            row["material_id"] = material_id
        created = self.repo.create_quiz(row)
        return str(created["id"])

    def open_attempt(self, quiz_id: str) -> Optional[QuizAttempt]:
        quiz = self.load_quiz(quiz_id)
        if quiz is None:
            return None
        rewards = RewardsService(self.profiles, quiz.user_id) if quiz.user_id else NoRewards()
        return QuizAttempt(quiz, self.repo, rewards, policy=self.policy)

    @staticmethod
    def attempt_view(attempt: QuizAttempt) -> dict:
        question = attempt.current_question
        return {
            "quizId": attempt.quiz.id,
            "state": attempt.state.value,
            "currentIndex": attempt.current_index,
            "questionCount": len(attempt.quiz.questions),
            "userAnswers": list(attempt.user_answers),
            "score": attempt.score,
            "canAdvance": attempt.can_advance(),
            "isLastQuestion": attempt.is_last_question,
            # the correct answer stays hidden until the quiz is graded
            "question": None if question is None else {
                "question": question.question,
                "options": question.options,
                "category": question.category,
            },
        }

    @staticmethod
    def review(quiz: Quiz) -> list[dict]:
        answers = quiz.user_answers or []
        items = []
        for i, q in enumerate(quiz.questions):
            chosen = answers[i] if i < len(answers) else -1
            # rows written outside the create endpoint are not validated
            known = 0 <= q.correct_answer < len(q.options)
            items.append(
                {
                    "index": i,
                    "question": q.question,
                    "chosenAnswer": chosen,
                    "correctAnswer": q.correct_answer,
                    "isCorrect": chosen == q.correct_answer,
                    "correctLabel": option_label(q.correct_answer) if known else None,
                    "correctOption": q.options[q.correct_answer] if known else None,
                    "explanation": q.explanation,
                }
            )
        return items
