"""
League reports computed from stored matches and goals.

Nothing here is cached; each call re-reads the tables, so results are a pure
function of the stored state.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func, and_, or_
from sqlalchemy.orm import Session

from league_api.core.config import settings
from league_api.core.errors import InvalidInputError
from league_api.data.models import Match, Team, Player, Goal, STATUS_FINISHED
from league_api.services.matches import MatchService

POINTS_WIN = 3
POINTS_DRAW = 1

OUTCOME_HOME_WIN = "home win"
OUTCOME_AWAY_WIN = "away win"
OUTCOME_DRAW = "draw"
OUTCOME_SCHEDULED = "scheduled"


@dataclass
class TeamStanding:
    team_id: int
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    position: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def record(self, scored: int, conceded: int):
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += POINTS_WIN
        elif scored < conceded:
            self.lost += 1
        else:
            self.drawn += 1
            self.points += POINTS_DRAW


@dataclass
class PlayerGoals:
    player_id: int
    player_name: str
    team_name: str
    goals: int


@dataclass
class GoalEntry:
    player_id: int
    player_name: str
    team_id: int
    minute: int


@dataclass
class MatchReport:
    match_id: int
    home_team: str
    away_team: str
    home_score: Optional[int]
    away_score: Optional[int]
    score: str
    match_time: datetime
    status: str
    outcome: str
    goals: List[GoalEntry] = field(default_factory=list)
    home_wins_before: Optional[int] = None
    away_wins_before: Optional[int] = None


def outcome_label(status: str, home_score: Optional[int], away_score: Optional[int]) -> str:
    if status != STATUS_FINISHED or home_score is None or away_score is None:
        return OUTCOME_SCHEDULED
    if home_score > away_score:
        return OUTCOME_HOME_WIN
    if home_score < away_score:
        return OUTCOME_AWAY_WIN
    return OUTCOME_DRAW


def format_score(home_score: Optional[int], away_score: Optional[int]) -> str:
    return f"{home_score or 0}-{away_score or 0}"


def rank_standings(standings: List[TeamStanding]) -> List[TeamStanding]:
    """Order by points, goal difference, goals scored; name and id keep it stable."""
    ranked = sorted(
        standings,
        key=lambda s: (-s.points, -s.goal_difference, -s.goals_for, s.team_name, s.team_id),
    )
    for position, standing in enumerate(ranked, start=1):
        standing.position = position
    return ranked


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def standings(self) -> List[TeamStanding]:
        teams = self.db.execute(select(Team.id, Team.name).order_by(Team.id)).all()
        table = {team_id: TeamStanding(team_id=team_id, team_name=name) for team_id, name in teams}

        finished = self.db.execute(
            select(Match.home_team_id, Match.away_team_id, Match.home_score, Match.away_score)
            .where(
                Match.status == STATUS_FINISHED,
                Match.home_score.is_not(None),
                Match.away_score.is_not(None),
            )
            .order_by(Match.match_time, Match.id)
        ).all()

        for home_id, away_id, home_score, away_score in finished:
            table[home_id].record(home_score, away_score)
            table[away_id].record(away_score, home_score)

        return rank_standings(list(table.values()))

    def top_scorers(self, limit: Optional[int] = None) -> List[PlayerGoals]:
        if limit is None:
            limit = settings.TOP_SCORERS_DEFAULT_LIMIT
        if limit < 1:
            raise InvalidInputError("limit must be a positive integer")

        goals = func.count(Goal.id).label("goals")
        rows = self.db.execute(
            select(Goal.player_id, Player.name, Team.name, goals)
            .join(Player, Player.id == Goal.player_id)
            .join(Team, Team.id == Player.team_id)
            .group_by(Goal.player_id, Player.name, Team.name)
            .order_by(goals.desc(), Player.name.asc(), Goal.player_id.asc())
            .limit(limit)
        ).all()

        return [
            PlayerGoals(player_id=player_id, player_name=player_name, team_name=team_name, goals=count)
            for player_id, player_name, team_name, count in rows
        ]

    def wins_before(self, team_id: int, before: datetime) -> int:
        """Finished matches the team won with kick-off strictly before ``before``."""
        return self.db.scalar(
            select(func.count(Match.id)).where(
                Match.status == STATUS_FINISHED,
                Match.match_time < before,
                or_(
                    and_(Match.home_team_id == team_id, Match.home_score > Match.away_score),
                    and_(Match.away_team_id == team_id, Match.away_score > Match.home_score),
                ),
            )
        )

    def match_report(self, match_id: int, include_history: bool = False) -> MatchReport:
        match = MatchService(self.db).get_match(match_id)

        report = MatchReport(
            match_id=match.id,
            home_team=match.home_team.name,
            away_team=match.away_team.name,
            home_score=match.home_score,
            away_score=match.away_score,
            score=format_score(match.home_score, match.away_score),
            match_time=match.match_time,
            status=match.status,
            outcome=outcome_label(match.status, match.home_score, match.away_score),
            goals=[
                GoalEntry(
                    player_id=goal.player_id,
                    player_name=goal.player.name,
                    team_id=goal.player.team_id,
                    minute=goal.minute,
                )
                for goal in match.goals
            ],
        )

        if include_history:
            report.home_wins_before = self.wins_before(match.home_team_id, match.match_time)
            report.away_wins_before = self.wins_before(match.away_team_id, match.match_time)

        return report


def get_report_service(db: Session):
    return ReportService(db)
