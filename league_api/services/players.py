from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from league_api.core.errors import InvalidInputError, InvalidReferenceError, NotFoundError
from league_api.core.logging import logger
from league_api.data.database import transaction
from league_api.data.models import (
    Player, Team, Goal, PLAYER_POSITIONS, MIN_SHIRT_NUMBER, MAX_SHIRT_NUMBER
)
from league_api.services.teams import clean_name

PLAYER_FIELDS = ("team_id", "name", "height_cm", "weight_kg", "position", "number")

DUPLICATE_NUMBER = "player number already exists in this team"


class PlayerService:
    def __init__(self, db: Session):
        self.db = db

    def _player_data(self, data: dict) -> dict:
        player_data = {key: data.get(key) for key in PLAYER_FIELDS}
        player_data["name"] = clean_name(player_data["name"])

        if player_data["position"] not in PLAYER_POSITIONS:
            raise InvalidInputError(f"position must be one of: {', '.join(PLAYER_POSITIONS)}")

        number = player_data["number"]
        if not isinstance(number, int) or not MIN_SHIRT_NUMBER <= number <= MAX_SHIRT_NUMBER:
            raise InvalidInputError(f"number must be between {MIN_SHIRT_NUMBER} and {MAX_SHIRT_NUMBER}")

        if self.db.get(Team, player_data["team_id"]) is None:
            raise InvalidReferenceError("team not found")

        return player_data

    def _ensure_number_free(self, team_id: int, number: int, exclude_id: int = None):
        stmt = select(Player.id).where(Player.team_id == team_id, Player.number == number)
        if exclude_id is not None:
            stmt = stmt.where(Player.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            logger.warning(f"Shirt number {number} already taken in team {team_id}")
            raise InvalidReferenceError(DUPLICATE_NUMBER)

    def _goal_count(self, player_id: int) -> int:
        return self.db.scalar(select(func.count(Goal.id)).where(Goal.player_id == player_id))

    def create_player(self, data: dict) -> Player:
        player_data = self._player_data(data)
        self._ensure_number_free(player_data["team_id"], player_data["number"])

        player = Player(**player_data)
        try:
            with transaction(self.db):
                self.db.add(player)
        except IntegrityError:
            # Lost a race against a concurrent insert of the same number
            raise InvalidReferenceError(DUPLICATE_NUMBER)

        logger.info(f"Created player {player.id} ({player.name}) in team {player.team_id}")
        return player

    def list_players(self):
        stmt = select(Player).options(selectinload(Player.team)).order_by(Player.team_id, Player.number)
        return self.db.execute(stmt).scalars().all()

    def get_player(self, player_id: int) -> Player:
        player = self.db.get(Player, player_id)
        if not player:
            raise NotFoundError("player not found")
        return player

    def list_players_by_team(self, team_id: int):
        if self.db.get(Team, team_id) is None:
            raise NotFoundError("team not found")
        stmt = (
            select(Player)
            .options(selectinload(Player.team))
            .where(Player.team_id == team_id)
            .order_by(Player.number)
        )
        return self.db.execute(stmt).scalars().all()

    def update_player(self, player_id: int, data: dict) -> Player:
        player = self.get_player(player_id)
        player_data = self._player_data(data)
        self._ensure_number_free(player_data["team_id"], player_data["number"], exclude_id=player.id)

        # Recorded goals tie a scorer to one of the two teams of each match
        if player_data["team_id"] != player.team_id and self._goal_count(player.id):
            logger.warning(f"Refusing to move player {player.id}: recorded goals for team {player.team_id}")
            raise InvalidReferenceError("player with recorded goals cannot change team")

        try:
            with transaction(self.db):
                for key, value in player_data.items():
                    setattr(player, key, value)
        except IntegrityError:
            raise InvalidReferenceError(DUPLICATE_NUMBER)

        logger.info(f"Updated player {player.id}")
        return player

    def delete_player(self, player_id: int):
        player = self.get_player(player_id)

        goals = self._goal_count(player_id)
        if goals:
            logger.warning(f"Refusing to delete player {player_id}: {goals} recorded goal(s)")
            raise InvalidReferenceError("player has recorded goals")

        with transaction(self.db):
            self.db.delete(player)
        logger.info(f"Deleted player {player_id}")


def get_player_service(db: Session):
    return PlayerService(db)
