from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from league_api.api.schemas import TeamIn
from league_api.api.serializers import team_to_dict
from league_api.core.security import get_current_admin
from league_api.data.database import get_db
from league_api.services.teams import get_team_service

router = APIRouter(prefix="/teams", tags=["teams"], dependencies=[Depends(get_current_admin)])


@router.get("")
def list_teams(db: Session = Depends(get_db)):
    teams = get_team_service(db).list_teams()
    return {"data": [team_to_dict(team) for team in teams]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(data: TeamIn, db: Session = Depends(get_db)):
    team = get_team_service(db).create_team(data.model_dump())
    return {"message": "Team created successfully", "data": team_to_dict(team)}


@router.get("/{team_id}")
def get_team(team_id: int, db: Session = Depends(get_db)):
    team = get_team_service(db).get_team(team_id)
    return {"data": team_to_dict(team)}


@router.put("/{team_id}")
def update_team(team_id: int, data: TeamIn, db: Session = Depends(get_db)):
    team = get_team_service(db).update_team(team_id, data.model_dump())
    return {"message": "Team updated successfully", "data": team_to_dict(team)}


@router.delete("/{team_id}")
def delete_team(team_id: int, db: Session = Depends(get_db)):
    get_team_service(db).delete_team(team_id)
    return {"message": "Team deleted successfully"}
