# app/services/leaderboard.py
import json
import logging
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

import redis
from sqlalchemy.orm import Session

from app.core.cache import cache_enabled, get_redis_client
from app.core.config import settings
from app.core.decorator import NotFoundError, db_exception
from app.models.exam_test import ExamTest
from app.models.test_attempt import TestAttempt
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankCandidate:
    attempt_id: int
    user_name: str
    total_score: int
    total_time_taken: int  # ns
    created_at: int  # ns, stable tiebreak
    completion_timestamp: Optional[int] = None


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    attempt_id: int
    user_name: str
    total_score: int
    total_time_taken: int
    completion_timestamp: Optional[int] = None


def rank_key(candidate: RankCandidate):
    return (
        -candidate.total_score,
        candidate.total_time_taken,
        candidate.created_at,
        candidate.attempt_id,
    )


def rank_attempts(
    candidates: Iterable[RankCandidate], limit: Optional[int] = None
) -> List[LeaderboardEntry]:
    """
    Order by score (desc), time taken (asc), then creation order.
    Every entry gets its own sequential rank, ties included.
    """
    ordered = sorted(candidates, key=rank_key)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardEntry(
            rank=position,
            attempt_id=c.attempt_id,
            user_name=c.user_name,
            total_score=c.total_score,
            total_time_taken=c.total_time_taken,
            completion_timestamp=c.completion_timestamp,
        )
        for position, c in enumerate(ordered, start=1)
    ]


def _cache_key(test_id: int) -> str:
    return f"leaderboard:{test_id}"


class LeaderboardService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def get_leaderboard(self, test_id: int) -> List[LeaderboardEntry]:
        """Top-N completed attempts for a test, recomputed unless cached."""
        test = self.db.query(ExamTest).filter(ExamTest.id == test_id).first()
        if not test:
            raise NotFoundError("Test not found", "test_not_found")

        cached = self._read_cache(test_id)
        if cached is not None:
            return cached

        rows = (
            self.db.query(TestAttempt, User.name)
            .join(User, User.id == TestAttempt.user_id)
            .filter(
                TestAttempt.test_id == test_id,
                TestAttempt.is_completed.is_(True),
            )
            .all()
        )
        candidates = [
            RankCandidate(
                attempt_id=attempt.id,
                user_name=user_name,
                total_score=attempt.total_score or 0,
                total_time_taken=attempt.total_time_taken or 0,
                created_at=attempt.created_at,
                completion_timestamp=attempt.completion_timestamp,
            )
            for attempt, user_name in rows
        ]
        entries = rank_attempts(candidates, limit=settings.leaderboard_size)
        self._write_cache(test_id, entries)
        return entries

    # ==================== Cache ====================

    def _read_cache(self, test_id: int) -> Optional[List[LeaderboardEntry]]:
        if not cache_enabled():
            return None
        try:
            raw = get_redis_client().get(_cache_key(test_id))
        except redis.RedisError as e:
            logger.warning(f"Leaderboard cache read failed for test {test_id}: {e}")
            return None
        if not raw:
            return None
        return [LeaderboardEntry(**item) for item in json.loads(raw)]

    def _write_cache(self, test_id: int, entries: List[LeaderboardEntry]) -> None:
        if not cache_enabled():
            return
        try:
            get_redis_client().setex(
                _cache_key(test_id),
                settings.leaderboard_cache_ttl,
                json.dumps([asdict(e) for e in entries]),
            )
        except redis.RedisError as e:
            logger.warning(f"Leaderboard cache write failed for test {test_id}: {e}")

    @staticmethod
    def invalidate(test_id: int) -> None:
        if not cache_enabled():
            return
        try:
            get_redis_client().delete(_cache_key(test_id))
        except redis.RedisError as e:
            logger.warning(f"Leaderboard cache invalidation failed for test {test_id}: {e}")
