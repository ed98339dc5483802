"""Plain-dict views of the stored entities for JSON responses."""
from dataclasses import asdict
from datetime import datetime
from typing import Optional

from league_api.data.models import Team, Player, Match, Goal, Admin


def format_time(value: Optional[datetime]) -> Optional[str]:
    # Stored timestamps are naive UTC
    if value is None:
        return None
    return value.replace(microsecond=0).isoformat() + "Z"


def team_to_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "name": team.name,
        "logo_url": team.logo_url,
        "founded_year": team.founded_year,
        "stadium_address": team.stadium_address,
        "city": team.city,
        "created_at": format_time(team.created_at),
        "updated_at": format_time(team.updated_at),
    }


def player_to_dict(player: Player) -> dict:
    return {
        "id": player.id,
        "team_id": player.team_id,
        "team_name": player.team.name if player.team else None,
        "name": player.name,
        "height_cm": player.height_cm,
        "weight_kg": player.weight_kg,
        "position": player.position,
        "number": player.number,
        "created_at": format_time(player.created_at),
        "updated_at": format_time(player.updated_at),
    }


def goal_to_dict(goal: Goal) -> dict:
    return {
        "id": goal.id,
        "match_id": goal.match_id,
        "player_id": goal.player_id,
        "player_name": goal.player.name,
        "minute": goal.minute,
    }


def match_to_dict(match: Match) -> dict:
    return {
        "id": match.id,
        "match_time": format_time(match.match_time),
        "home_team_id": match.home_team_id,
        "away_team_id": match.away_team_id,
        "home_team": match.home_team.name,
        "away_team": match.away_team.name,
        "home_score": match.home_score,
        "away_score": match.away_score,
        "status": match.status,
        "goals": [goal_to_dict(goal) for goal in match.goals],
        "created_at": format_time(match.created_at),
        "updated_at": format_time(match.updated_at),
    }


def admin_to_dict(admin: Admin) -> dict:
    # Never expose the password hash
    return {"id": admin.id, "name": admin.name, "email": admin.email}


def report_to_dict(report) -> dict:
    data = asdict(report)
    data["match_time"] = format_time(report.match_time)
    return data


def standing_to_dict(standing) -> dict:
    data = asdict(standing)
    data["goal_difference"] = standing.goal_difference
    return data
