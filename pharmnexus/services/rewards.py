import logging
from dataclasses import dataclass

from ..repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 500


@dataclass(frozen=True)
class LevelInfo:
    points: int
    level: int
    progress: float  # percent towards the next level


def level_for(points: int) -> LevelInfo:
    points = max(points, 0)
    return LevelInfo(
        points=points,
        level=points // POINTS_PER_LEVEL + 1,
        progress=(points % POINTS_PER_LEVEL) * 100 / POINTS_PER_LEVEL,
    )


class RewardsService:
    """Adds experience points to one user's profile."""

    def __init__(self, repo: ProfileRepository, user_id: str) -> None:
        self.repo = repo
        self.user_id = user_id

    def award(self, amount: int, reason: str) -> None:
        if amount == 0:
            return
        try:
            current = self.repo.get_points(self.user_id)
            if current is None:
                logger.warning("No profile %s; dropping +%d XP (%s)", self.user_id, amount, reason)
                return
            self.repo.set_points(self.user_id, current + amount)
        except Exception:
            # awards never block the caller
            logger.exception("Awarding %d XP to %s failed", amount, self.user_id)
            return
        logger.info("+%d XP for %s: %s", amount, self.user_id, reason)


class NoRewards:
    """Used for quizzes without an owner."""

    def award(self, amount: int, reason: str) -> None:
        logger.debug("Skipping award of %d XP (%s): quiz has no owner", amount, reason)
