from dataclasses import dataclass
from typing import List, Literal, Optional

UNANSWERED = -1

Category = Literal["clinical", "dosage", "mechanism", "interaction"]

@dataclass(frozen=True)
class Question:
    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""
    category: Optional[Category] = None

@dataclass(frozen=True)
class Quiz:
    id: str
    title: str
    questions: List[Question]
    deadline: str = ""
    completed: bool = False
    score: Optional[float] = None
    user_answers: Optional[List[int]] = None
    current_index: Optional[int] = None
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    material_id: Optional[str] = None
    created_at: Optional[str] = None


def question_from_json(raw: dict) -> Question:
    # Question objects are stored as JSON inside quizzes.questions, in the
    # camelCase shape the web client writes.
    return Question(
        question=raw["question"],
        options=list(raw["options"]),
        correct_answer=int(raw["correctAnswer"]),
        explanation=raw.get("explanation") or "",
        category=raw.get("category"),
    )


def question_to_json(q: Question) -> dict:
    data = {
        "question": q.question,
        "options": list(q.options),
        "correctAnswer": q.correct_answer,
        "explanation": q.explanation,
    }
    if q.category is not None:
        data["category"] = q.category
    return data


def quiz_from_row(row: dict) -> Quiz:
    return Quiz(
        id=str(row["id"]),
        title=row["title"],
        questions=[question_from_json(q) for q in row.get("questions") or []],
        deadline=row.get("deadline") or "",
        completed=bool(row.get("completed")),
        score=row.get("score"),
        user_answers=row.get("user_answers"),
        current_index=row.get("current_index"),
        user_id=row.get("user_id"),
        course_id=row.get("course_id"),
        material_id=row.get("material_id"),
        created_at=row.get("created_at"),
    )
