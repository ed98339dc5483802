from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()

# Match status values
STATUS_SCHEDULED = "scheduled"
STATUS_FINISHED = "finished"
MATCH_STATUSES = (STATUS_SCHEDULED, STATUS_FINISHED)

PLAYER_POSITIONS = ("striker", "midfielder", "defender", "goalkeeper")

MIN_SHIRT_NUMBER, MAX_SHIRT_NUMBER = 1, 99
MIN_GOAL_MINUTE, MAX_GOAL_MINUTE = 0, 130


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    logo_url = Column(String(255), nullable=True)
    founded_year = Column(Integer, nullable=True)
    stadium_address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    players = relationship(
        "Player",
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Player.number",
    )

    def __repr__(self):
        return f"<Team(id={self.id}, name='{self.name}')>"


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    height_cm = Column(Float, nullable=True)
    weight_kg = Column(Float, nullable=True)
    position = Column(String(20), nullable=False)
    number = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    team = relationship("Team", back_populates="players")

    __table_args__ = (
        UniqueConstraint("team_id", "number", name="uix_player_team_number"),
        CheckConstraint(
            f"number BETWEEN {MIN_SHIRT_NUMBER} AND {MAX_SHIRT_NUMBER}",
            name="ck_player_number",
        ),
        CheckConstraint(
            "position IN ('striker','midfielder','defender','goalkeeper')",
            name="ck_player_position",
        ),
    )

    def __repr__(self):
        return f"<Player(id={self.id}, name='{self.name}', team_id={self.team_id}, number={self.number})>"


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    match_time = Column(DateTime, nullable=False, index=True)
    home_team_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False, index=True)
    away_team_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False, index=True)
    home_score = Column(Integer, nullable=True)  # set only once the match is finished
    away_score = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=STATUS_SCHEDULED, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    home_team = relationship("Team", foreign_keys=[home_team_id])
    away_team = relationship("Team", foreign_keys=[away_team_id])
    goals = relationship(
        "Goal",
        back_populates="match",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: (Goal.minute, Goal.id),
    )

    __table_args__ = (
        CheckConstraint("home_team_id <> away_team_id", name="ck_match_distinct_teams"),
        CheckConstraint("status IN ('scheduled','finished')", name="ck_match_status"),
        CheckConstraint(
            "(status = 'finished' AND home_score IS NOT NULL AND away_score IS NOT NULL) OR "
            "(status = 'scheduled' AND home_score IS NULL AND away_score IS NULL)",
            name="ck_match_scores_status",
        ),
    )

    @property
    def is_finished(self) -> bool:
        return (
            self.status == STATUS_FINISHED
            and self.home_score is not None
            and self.away_score is not None
        )

    def __repr__(self):
        return (
            f"<Match(id={self.id}, home_team_id={self.home_team_id}, "
            f"away_team_id={self.away_team_id}, status='{self.status}')>"
        )


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="RESTRICT"), nullable=False, index=True)
    minute = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    match = relationship("Match", back_populates="goals")
    player = relationship("Player")

    __table_args__ = (
        CheckConstraint(
            f"minute BETWEEN {MIN_GOAL_MINUTE} AND {MAX_GOAL_MINUTE}",
            name="ck_goal_minute",
        ),
    )


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    # Always 1; the unique index allows a single admin row.
    singleton = Column(Integer, unique=True, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
