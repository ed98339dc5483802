from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, update, delete, or_
from sqlalchemy.orm import Session, selectinload

from league_api.core.errors import (
    InvalidInputError, InvalidReferenceError, InvalidStateError, NotFoundError
)
from league_api.core.logging import logger
from league_api.data.database import transaction
from league_api.data.models import (
    Match, Team, Player, Goal,
    STATUS_SCHEDULED, STATUS_FINISHED, MIN_GOAL_MINUTE, MAX_GOAL_MINUTE
)


def to_utc_naive(value: datetime) -> datetime:
    """Store every timestamp as naive UTC so range scans compare correctly."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _with_relations(stmt):
    return stmt.options(
        selectinload(Match.home_team),
        selectinload(Match.away_team),
        selectinload(Match.goals).selectinload(Goal.player),
    )


class MatchService:
    def __init__(self, db: Session):
        self.db = db

    def _match_data(self, data: dict) -> dict:
        match_time = data.get("match_time")
        home_team_id = data.get("home_team_id")
        away_team_id = data.get("away_team_id")

        if not isinstance(match_time, datetime):
            raise InvalidInputError("match_time is required")
        if home_team_id == away_team_id:
            raise InvalidInputError("home and away teams must be different")
        for label, team_id in (("home", home_team_id), ("away", away_team_id)):
            if self.db.get(Team, team_id) is None:
                raise InvalidReferenceError(f"{label} team not found")

        return {
            "match_time": to_utc_naive(match_time),
            "home_team_id": home_team_id,
            "away_team_id": away_team_id,
        }

    def create_match(self, data: dict) -> Match:
        match = Match(status=STATUS_SCHEDULED, **self._match_data(data))
        with transaction(self.db):
            self.db.add(match)
        logger.info(
            f"Scheduled match {match.id}: team {match.home_team_id} vs team {match.away_team_id} "
            f"at {match.match_time.isoformat()}"
        )
        return self.get_match(match.id)

    def list_matches(self, start: Optional[datetime] = None, end: Optional[datetime] = None):
        """All matches by kick-off time, optionally limited to an inclusive window."""
        stmt = _with_relations(select(Match))

        if (start is None) != (end is None):
            raise InvalidInputError("start_date and end_date must be given together")
        if start is not None:
            start, end = to_utc_naive(start), to_utc_naive(end)
            if start > end:
                raise InvalidInputError("start_date must not be after end_date")
            stmt = stmt.where(Match.match_time.between(start, end))

        stmt = stmt.order_by(Match.match_time, Match.id)
        return self.db.execute(stmt).scalars().all()

    def list_matches_by_team(self, team_id: int):
        if self.db.get(Team, team_id) is None:
            raise NotFoundError("team not found")
        stmt = (
            _with_relations(select(Match))
            .where(or_(Match.home_team_id == team_id, Match.away_team_id == team_id))
            .order_by(Match.match_time, Match.id)
        )
        return self.db.execute(stmt).scalars().all()

    def get_match(self, match_id: int) -> Match:
        stmt = _with_relations(select(Match)).where(Match.id == match_id)
        match = self.db.execute(stmt).scalar_one_or_none()
        if not match:
            raise NotFoundError("match not found")
        return match

    def update_match(self, match_id: int, data: dict) -> Match:
        match = self.get_match(match_id)
        if match.status == STATUS_FINISHED:
            logger.warning(f"Rejected update of finished match {match_id}")
            raise InvalidStateError("cannot update a finished match")

        match_data = self._match_data(data)
        with transaction(self.db):
            for key, value in match_data.items():
                setattr(match, key, value)
        logger.info(f"Updated match {match_id}")
        return self.get_match(match_id)

    def delete_match(self, match_id: int):
        match = self.db.get(Match, match_id)
        if not match:
            raise NotFoundError("match not found")
        with transaction(self.db):
            self.db.delete(match)
        logger.info(f"Deleted match {match_id}")

    def report_result(self, match_id: int, home_score: int, away_score: int, goals: Iterable) -> Match:
        """
        Record the final result of a scheduled match.

        ``goals`` is an iterable of ``(player_id, minute)`` pairs. Every scorer
        must play for one of the two teams. The status change, the scores and
        the goal replacement are written in one transaction; a match that is
        already finished is rejected, including when a concurrent report
        finishes it first.
        """
        match = self.get_match(match_id)
        if match.status == STATUS_FINISHED:
            logger.warning(f"Rejected result report for finished match {match_id}")
            raise InvalidStateError("match result already reported")

        for label, score in (("home_score", home_score), ("away_score", away_score)):
            if not isinstance(score, int) or score < 0:
                raise InvalidInputError(f"{label} must be a non-negative integer")

        events = [(int(player_id), int(minute)) for player_id, minute in goals]
        for _, minute in events:
            if not MIN_GOAL_MINUTE <= minute <= MAX_GOAL_MINUTE:
                raise InvalidInputError(f"goal minute must be between {MIN_GOAL_MINUTE} and {MAX_GOAL_MINUTE}")

        player_ids = {player_id for player_id, _ in events}
        players = {
            p.id: p
            for p in self.db.execute(select(Player).where(Player.id.in_(player_ids))).scalars()
        } if player_ids else {}

        playing = (match.home_team_id, match.away_team_id)
        for player_id in sorted(player_ids):
            player = players.get(player_id)
            if player is None:
                raise InvalidReferenceError(f"player {player_id} not found")
            if player.team_id not in playing:
                raise InvalidReferenceError(f"player {player_id} does not play for either team")

        with transaction(self.db):
            finished = self.db.execute(
                update(Match)
                .where(Match.id == match_id, Match.status == STATUS_SCHEDULED)
                .values(
                    home_score=home_score,
                    away_score=away_score,
                    status=STATUS_FINISHED,
                    updated_at=datetime.utcnow(),
                )
            )
            if finished.rowcount != 1:
                raise InvalidStateError("match result already reported")

            self.db.execute(delete(Goal).where(Goal.match_id == match_id))
            self.db.add_all(
                Goal(match_id=match_id, player_id=player_id, minute=minute)
                for player_id, minute in events
            )

        logger.info(
            f"Reported result for match {match_id}: {home_score}-{away_score} "
            f"with {len(events)} goal(s)"
        )
        self.db.expire_all()
        return self.get_match(match_id)


def get_match_service(db: Session):
    return MatchService(db)
