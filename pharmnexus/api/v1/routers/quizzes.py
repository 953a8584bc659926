import logging
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, HTTPException, Depends, Query, status
from redis.asyncio import Redis

from ....core.config import settings
from ....core.redis_manager import get_redis
from ....core.supabase_client import get_supabase
from ....domain.model import Question
from ....schemas.quiz_schemas import (
    ActiveQuizOut,
    AdvanceOut,
    AnswerIn,
    AttemptOut,
    QuizCreateIn,
    QuizListItem,
    QuizOut,
    ReviewOut,
)
from ....services.active_attempts import ActiveAttemptRegistry
from ....services.quiz_attempt import InvalidTransition, PersistenceError, QuizAttempt
from ....services.quiz_service import QuizService
from ....repositories.profile_repository import ProfileRepository
from ....repositories.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["quizzes"])

# Dependency factories

def get_service() -> QuizService:
    client = get_supabase()
    return QuizService(
        QuizRepository(client),
        ProfileRepository(client),
        policy=settings.QUIZ_PERSISTENCE_POLICY,
    )

async def get_registry() -> ActiveAttemptRegistry:
    redis: Redis = await get_redis()
    return ActiveAttemptRegistry(redis, settings.ACTIVE_ATTEMPT_TTL_SECONDS)

ServiceDep = Annotated[QuizService, Depends(get_service)]
RegistryDep = Annotated[ActiveAttemptRegistry, Depends(get_registry)]


def _open_or_404(svc: QuizService, quiz_id: str) -> QuizAttempt:
    try:
        attempt = svc.open_attempt(quiz_id)
    except ValueError as e:
        # stored row without questions
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if attempt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return attempt

def _transition_error(e: Exception) -> HTTPException:
    if isinstance(e, PersistenceError):
        logger.error("%s", e)
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Progress could not be saved")
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/", response_model=list[QuizListItem])
async def list_quizzes(
    svc: ServiceDep,
    userId: str = Query(..., min_length=1),
    quiz_status: Optional[Literal["pending", "completed"]] = Query(None, alias="status"),
):
    return svc.list_quizzes(userId, quiz_status)

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_quiz(payload: QuizCreateIn, svc: ServiceDep):
    questions = [
        Question(
            question=q.question,
            options=q.options,
            correct_answer=q.correctAnswer,
            explanation=q.explanation,
            category=q.category,
        )
        for q in payload.questions
    ]
    quiz_id = svc.create_quiz(
        payload.userId,
        payload.courseId,
        payload.title,
        questions,
        deadline=payload.deadline,
        material_id=payload.materialId,
    )
    return {"id": quiz_id}

@router.get("/active", response_model=ActiveQuizOut)
async def get_active_quiz(registry: RegistryDep, userId: str = Query(..., min_length=1)):
    return {"userId": userId, "quizId": await registry.get_active(userId)}

@router.get("/{quiz_id}", response_model=QuizOut)
async def get_quiz(quiz_id: str, svc: ServiceDep):
    data = svc.get_quiz(quiz_id)
    if not data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return data

@router.post("/{quiz_id}/attempt", response_model=AttemptOut)
async def open_attempt(quiz_id: str, svc: ServiceDep, registry: RegistryDep):
    attempt = _open_or_404(svc, quiz_id)
    if not attempt.completed and attempt.quiz.user_id:
        await registry.mark_active(attempt.quiz.user_id, quiz_id)
    return svc.attempt_view(attempt)

@router.put("/{quiz_id}/attempt/answer", response_model=AttemptOut)
async def select_answer(quiz_id: str, payload: AnswerIn, svc: ServiceDep):
    attempt = _open_or_404(svc, quiz_id)
    try:
        attempt.select_answer(payload.questionIndex, payload.optionIndex)
    except (InvalidTransition, PersistenceError) as e:
        raise _transition_error(e)
    return svc.attempt_view(attempt)

@router.post("/{quiz_id}/attempt/advance", response_model=AdvanceOut)
async def advance(quiz_id: str, svc: ServiceDep, registry: RegistryDep):
    attempt = _open_or_404(svc, quiz_id)
    try:
        advanced = attempt.advance()
    except PersistenceError as e:
        raise _transition_error(e)
    if advanced and attempt.completed and attempt.quiz.user_id:
        await registry.clear(attempt.quiz.user_id, quiz_id)
    return {**svc.attempt_view(attempt), "advanced": advanced}

@router.post("/{quiz_id}/attempt/suspend")
async def suspend(quiz_id: str, svc: ServiceDep, registry: RegistryDep):
    attempt = _open_or_404(svc, quiz_id)
    try:
        attempt.suspend()
    except InvalidTransition as e:
        raise _transition_error(e)
    if attempt.quiz.user_id:
        await registry.clear(attempt.quiz.user_id, quiz_id)
    return {"status": "suspended", "currentIndex": attempt.current_index}

@router.get("/{quiz_id}/review", response_model=ReviewOut)
async def review(quiz_id: str, svc: ServiceDep):
    quiz = svc.load_quiz(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    if not quiz.completed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Quiz is not completed yet")
    return {
        "quizId": quiz.id,
        "title": quiz.title,
        "score": quiz.score,
        "items": svc.review(quiz),
    }
