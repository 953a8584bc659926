from typing import Annotated, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

Category = Literal["clinical", "dosage", "mechanism", "interaction"]

class QuestionIn(BaseModel):
    question: str = Field(..., min_length=1)
    options: Annotated[list[str], Field(min_length=4, max_length=4)]  # exactly 4
    correctAnswer: int = Field(..., ge=0, le=3)
    explanation: str = ""
    category: Optional[Category] = None

class QuizCreateIn(BaseModel):
    userId: str = Field(..., min_length=1)
    courseId: str = Field(..., min_length=1)
    materialId: Optional[str] = None
    title: str = Field(..., min_length=1)
    deadline: Optional[str] = None
    questions: List[QuestionIn] = Field(..., min_length=1)

class QuestionOut(BaseModel):
    question: str
    options: list[str]
    correctAnswer: int
    explanation: str
    category: Optional[Category] = None

class QuizOut(BaseModel):
    id: str
    title: str
    userId: Optional[str] = None
    courseId: Optional[str] = None
    materialId: Optional[str] = None
    deadline: str
    completed: bool
    score: Optional[float] = None
    createdAt: Optional[str] = None
    questions: List[QuestionOut]

class QuizListItem(BaseModel):
    id: str
    title: str
    courseId: Optional[str] = None
    questionCount: int
    deadline: Optional[str] = None
    completed: bool
    score: Optional[float] = None
    currentIndex: int
    createdAt: Optional[str] = None

class ActiveQuizOut(BaseModel):
    userId: str
    quizId: Optional[str] = None

class AnswerIn(BaseModel):
    questionIndex: int = Field(..., ge=0)
    optionIndex: int = Field(..., ge=0)

class AttemptQuestionOut(BaseModel):
    question: str
    options: list[str]
    category: Optional[Category] = None

class AttemptOut(BaseModel):
    quizId: str
    state: Literal["in_progress", "completed"]
    currentIndex: int
    questionCount: int
    userAnswers: list[int]
    score: Optional[float] = None
    canAdvance: bool
    isLastQuestion: bool
    question: Optional[AttemptQuestionOut] = None

    @model_validator(mode="after")
    def _answers_match_questions(self):
        if len(self.userAnswers) != self.questionCount:
            raise ValueError("userAnswers must have one entry per question")
        return self

class AdvanceOut(AttemptOut):
    advanced: bool

class ReviewItemOut(BaseModel):
    index: int
    question: str
    chosenAnswer: int
    correctAnswer: int
    isCorrect: bool
    correctLabel: Optional[str] = None
    correctOption: Optional[str] = None
    explanation: str

class ReviewOut(BaseModel):
    quizId: str
    title: str
    score: Optional[float] = None
    items: List[ReviewItemOut]

class LevelOut(BaseModel):
    userId: str
    points: int
    level: int
    progress: float
