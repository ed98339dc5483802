from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from league_api.api.schemas import MatchIn, ResultIn
from league_api.api.serializers import match_to_dict
from league_api.core.security import get_current_admin
from league_api.data.database import get_db
from league_api.services.matches import get_match_service

router = APIRouter(prefix="/matches", tags=["matches"], dependencies=[Depends(get_current_admin)])


@router.get("")
def list_matches(
    start_date: Optional[datetime] = Query(None, description="RFC3339 lower bound, inclusive"),
    end_date: Optional[datetime] = Query(None, description="RFC3339 upper bound, inclusive"),
    db: Session = Depends(get_db),
):
    matches = get_match_service(db).list_matches(start_date, end_date)
    return {"data": [match_to_dict(match) for match in matches]}


@router.get("/by-team/{team_id}")
def list_matches_by_team(team_id: int, db: Session = Depends(get_db)):
    matches = get_match_service(db).list_matches_by_team(team_id)
    return {"data": [match_to_dict(match) for match in matches]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_match(data: MatchIn, db: Session = Depends(get_db)):
    match = get_match_service(db).create_match(data.model_dump())
    return {"message": "Match created successfully", "data": match_to_dict(match)}


@router.get("/{match_id}")
def get_match(match_id: int, db: Session = Depends(get_db)):
    match = get_match_service(db).get_match(match_id)
    return {"data": match_to_dict(match)}


@router.put("/{match_id}")
def update_match(match_id: int, data: MatchIn, db: Session = Depends(get_db)):
    match = get_match_service(db).update_match(match_id, data.model_dump())
    return {"message": "Match updated successfully", "data": match_to_dict(match)}


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match(match_id: int, db: Session = Depends(get_db)):
    get_match_service(db).delete_match(match_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{match_id}/report")
def report_result(match_id: int, data: ResultIn, db: Session = Depends(get_db)):
    """Finish a scheduled match with its final score and scorers"""
    match = get_match_service(db).report_result(
        match_id,
        data.home_score,
        data.away_score,
        [(goal.player_id, goal.minute) for goal in data.goals],
    )
    return {"message": "Match result reported successfully", "data": match_to_dict(match)}
