from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from league_api.api.serializers import report_to_dict, standing_to_dict
from league_api.core.security import get_current_admin
from league_api.data.database import get_db
from league_api.services.reports import get_report_service

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(get_current_admin)])


@router.get("/standings")
def standings(db: Session = Depends(get_db)):
    table = get_report_service(db).standings()
    return {"data": [standing_to_dict(row) for row in table]}


@router.get("/top-scorers")
def top_scorers(limit: Optional[int] = Query(None, ge=1), db: Session = Depends(get_db)):
    scorers = get_report_service(db).top_scorers(limit)
    return {"data": [asdict(row) for row in scorers]}


@router.get("/matches/{match_id}")
def match_report(match_id: int, include_history: bool = False, db: Session = Depends(get_db)):
    report = get_report_service(db).match_report(match_id, include_history=include_history)
    return {"data": report_to_dict(report)}
