from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from league_api.api.schemas import LoginIn, RegisterIn
from league_api.api.serializers import admin_to_dict
from league_api.data.database import get_db
from league_api.services.admins import get_admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterIn, db: Session = Depends(get_db)):
    """Register the league's single admin account"""
    admin = get_admin_service(db).register(data.name, data.email, data.password)
    return {"message": "admin registered successfully", "data": admin_to_dict(admin)}


@router.post("/login")
def login(data: LoginIn, db: Session = Depends(get_db)):
    token, admin = get_admin_service(db).login(data.email, data.password)
    return {"message": "login successful", "token": token, "data": admin_to_dict(admin)}
