"""
Tests for leaderboard ranking.
"""

import random

from app.core.clock import NANOS_PER_SECOND
from app.services.leaderboard import RankCandidate, rank_attempts


def _candidate(attempt_id, score, seconds, created_at=None):
    return RankCandidate(
        attempt_id=attempt_id,
        user_name=f"user-{attempt_id}",
        total_score=score,
        total_time_taken=seconds * NANOS_PER_SECOND,
        created_at=created_at if created_at is not None else attempt_id,
    )


class TestRankAttempts:
    def test_faster_attempt_wins_on_equal_score(self):
        """(50, 600s) and (50, 500s): the 500s attempt ranks first."""
        entries = rank_attempts([_candidate(1, 50, 600), _candidate(2, 50, 500)])

        assert [(e.rank, e.attempt_id) for e in entries] == [(1, 2), (2, 1)]

    def test_higher_score_beats_faster_time(self):
        entries = rank_attempts([_candidate(1, 40, 100), _candidate(2, 50, 900)])
        assert entries[0].attempt_id == 2

    def test_full_tie_broken_by_creation_order(self):
        entries = rank_attempts(
            [
                _candidate(3, 50, 500, created_at=30),
                _candidate(1, 50, 500, created_at=20),
                _candidate(2, 50, 500, created_at=20),
            ]
        )
        assert [e.attempt_id for e in entries] == [1, 2, 3]
        assert [e.rank for e in entries] == [1, 2, 3]

    def test_ranks_are_sequential_and_truncated(self):
        candidates = [_candidate(i, i % 4, 100 + i) for i in range(1, 16)]
        entries = rank_attempts(candidates, limit=10)

        assert len(entries) == 10
        assert [e.rank for e in entries] == list(range(1, 11))

    def test_order_is_total_and_deterministic(self):
        rng = random.Random(7)
        candidates = [
            _candidate(i, rng.randint(0, 5), rng.randint(100, 110)) for i in range(1, 40)
        ]
        first = rank_attempts(candidates)

        for _ in range(5):
            shuffled = candidates[:]
            rng.shuffle(shuffled)
            assert rank_attempts(shuffled) == first

        for higher, lower in zip(first, first[1:]):
            assert higher.total_score > lower.total_score or (
                higher.total_score == lower.total_score
                and higher.total_time_taken <= lower.total_time_taken
            )

    def test_empty_input(self):
        assert rank_attempts([]) == []


class TestLeaderboardEndpoint:
    def _complete(self, client, headers, test, clock, seconds, correct):
        attempt = client.post(f"/tests/{test.id}/attempts", headers=headers).json()
        ids = test.sections[0].question_ids
        answers = [
            {"question_id": qid, "selected_option_index": 1 if i < correct else 0}
            for i, qid in enumerate(ids)
        ]
        clock.advance(seconds=seconds)
        response = client.post(
            f"/attempts/{attempt['id']}/sections/1/submit",
            json={"answers": answers},
            headers=headers,
        )
        assert response.status_code == 200
        return attempt["id"]

    def test_leaderboard_orders_completed_attempts(
        self, client, auth_headers, other_headers, chapter_test, clock
    ):
        slow = self._complete(client, auth_headers, chapter_test, clock, 600, correct=2)
        fast = self._complete(client, other_headers, chapter_test, clock, 500, correct=2)
        # in-progress attempts are not ranked
        client.post(f"/tests/{chapter_test.id}/attempts", headers=auth_headers)

        response = client.get(
            f"/tests/{chapter_test.id}/leaderboard", headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["test_name"] == "Limits and Continuity"
        assert [(e["rank"], e["attempt_id"]) for e in data["entries"]] == [
            (1, fast),
            (2, slow),
        ]
        assert data["entries"][0]["user_name"] == "Ravi Student"
        assert data["entries"][0]["total_score"] == 4
        assert data["entries"][0]["total_time_taken"] == 500 * NANOS_PER_SECOND

    def test_leaderboard_for_unknown_test(self, client, auth_headers):
        response = client.get("/tests/999/leaderboard", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "test_not_found"

    def test_empty_leaderboard(self, client, auth_headers, chapter_test):
        response = client.get(
            f"/tests/{chapter_test.id}/leaderboard", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["entries"] == []
