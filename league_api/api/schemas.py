import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from league_api.core.security import MAX_PASSWORD_BYTES

Position = Literal["striker", "midfielder", "defender", "goalkeeper"]

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# Teams
class TeamIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    logo_url: Optional[str] = Field(default=None, max_length=255)
    founded_year: Optional[int] = Field(default=None, ge=1800, le=2100)
    stadium_address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)


# Players
class PlayerIn(BaseModel):
    team_id: int
    name: str = Field(min_length=1, max_length=100)
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    position: Position
    number: int = Field(ge=1, le=99)


# Matches
class MatchIn(BaseModel):
    match_time: datetime
    home_team_id: int
    away_team_id: int

    @model_validator(mode="after")
    def teams_differ(self):
        if self.home_team_id == self.away_team_id:
            raise ValueError("home and away teams must be different")
        return self


class GoalIn(BaseModel):
    player_id: int
    minute: int = Field(ge=0, le=130)


class ResultIn(BaseModel):
    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)
    goals: List[GoalIn] = Field(default_factory=list)


# Admin
class LoginIn(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=100)
    password: str = Field(min_length=8)

    @field_validator("email")
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email address")
        return value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value
