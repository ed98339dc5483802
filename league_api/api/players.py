from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from league_api.api.schemas import PlayerIn
from league_api.api.serializers import player_to_dict
from league_api.core.security import get_current_admin
from league_api.data.database import get_db
from league_api.services.players import get_player_service

router = APIRouter(prefix="/players", tags=["players"], dependencies=[Depends(get_current_admin)])


@router.get("")
def list_players(db: Session = Depends(get_db)):
    players = get_player_service(db).list_players()
    return {"data": [player_to_dict(player) for player in players]}


@router.get("/by-team/{team_id}")
def list_players_by_team(team_id: int, db: Session = Depends(get_db)):
    players = get_player_service(db).list_players_by_team(team_id)
    return {"data": [player_to_dict(player) for player in players]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_player(data: PlayerIn, db: Session = Depends(get_db)):
    player = get_player_service(db).create_player(data.model_dump())
    return {"message": "Player created successfully", "data": player_to_dict(player)}


@router.get("/{player_id}")
def get_player(player_id: int, db: Session = Depends(get_db)):
    player = get_player_service(db).get_player(player_id)
    return {"data": player_to_dict(player)}


@router.put("/{player_id}")
def update_player(player_id: int, data: PlayerIn, db: Session = Depends(get_db)):
    player = get_player_service(db).update_player(player_id, data.model_dump())
    return {"message": "Player updated successfully", "data": player_to_dict(player)}


@router.delete("/{player_id}")
def delete_player(player_id: int, db: Session = Depends(get_db)):
    get_player_service(db).delete_player(player_id)
    return {"message": "Player deleted successfully"}
