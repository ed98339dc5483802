from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from league_api.core.errors import InvalidInputError, InvalidReferenceError, NotFoundError
from league_api.core.logging import logger
from league_api.data.database import transaction
from league_api.data.models import Team, Match

TEAM_FIELDS = ("name", "logo_url", "founded_year", "stadium_address", "city")


def clean_name(value, label: str = "name") -> str:
    """Strip a display name and reject it when nothing is left."""
    name = (value or "").strip()
    if not name:
        raise InvalidInputError(f"{label} must not be empty")
    return name


class TeamService:
    def __init__(self, db: Session):
        self.db = db

    def _team_data(self, data: dict) -> dict:
        team_data = {key: data.get(key) for key in TEAM_FIELDS}
        team_data["name"] = clean_name(team_data["name"])
        return team_data

    def create_team(self, data: dict) -> Team:
        team = Team(**self._team_data(data))
        with transaction(self.db):
            self.db.add(team)
        logger.info(f"Created team {team.id} ({team.name})")
        return team

    def list_teams(self):
        return self.db.execute(select(Team).order_by(Team.name, Team.id)).scalars().all()

    def get_team(self, team_id: int) -> Team:
        team = self.db.get(Team, team_id)
        if not team:
            raise NotFoundError("team not found")
        return team

    def update_team(self, team_id: int, data: dict) -> Team:
        team = self.get_team(team_id)
        with transaction(self.db):
            for key, value in self._team_data(data).items():
                setattr(team, key, value)
        logger.info(f"Updated team {team.id}")
        return team

    def delete_team(self, team_id: int):
        team = self.get_team(team_id)

        # Matches keep a RESTRICT reference to both of their teams
        referencing = self.db.scalar(
            select(func.count(Match.id)).where(
                or_(Match.home_team_id == team_id, Match.away_team_id == team_id)
            )
        )
        if referencing:
            logger.warning(f"Refusing to delete team {team_id}: referenced by {referencing} match(es)")
            raise InvalidReferenceError("team is referenced by existing matches")

        try:
            with transaction(self.db):
                self.db.delete(team)
        except IntegrityError:
            # A cascaded player is still referenced by recorded goals
            raise InvalidReferenceError("team has players with recorded goals")
        logger.info(f"Deleted team {team_id}")


def get_team_service(db: Session):
    return TeamService(db)
