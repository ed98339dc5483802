"""Tests for team and player management."""

from datetime import datetime

import pytest

from conftest import make_team, make_player, make_match
from league_api.core.errors import InvalidInputError, InvalidReferenceError, NotFoundError
from league_api.data.models import Player
from league_api.services.players import PlayerService
from league_api.services.teams import TeamService


def player_data(team, name="Eddie", number=7, position="striker", **extra):
    data = {"team_id": team.id, "name": name, "number": number, "position": position}
    data.update(extra)
    return data


class TestTeams:
    def test_create_and_get(self, db):
        service = TeamService(db)
        team = service.create_team({
            "name": "  Rovers ", "city": "Bristol", "founded_year": 1883,
            "logo_url": "https://example.com/rovers.png", "stadium_address": "Memorial Stadium",
        })

        fetched = service.get_team(team.id)
        assert fetched.name == "Rovers"
        assert fetched.founded_year == 1883

    def test_name_must_not_be_blank(self, db):
        with pytest.raises(InvalidInputError):
            TeamService(db).create_team({"name": "   "})

    def test_list_is_sorted_by_name(self, db):
        for name in ("Wolves", "Albion", "Rovers"):
            make_team(db, name)

        assert [t.name for t in TeamService(db).list_teams()] == ["Albion", "Rovers", "Wolves"]

    def test_update(self, db, league):
        team = TeamService(db).update_team(league["lions"].id, {"name": "Big Lions", "city": "York"})

        assert team.name == "Big Lions"
        assert team.city == "York"

    def test_get_missing(self, db):
        with pytest.raises(NotFoundError):
            TeamService(db).get_team(5)

    def test_delete_cascades_players(self, db):
        team = make_team(db, "Short Lived")
        player_id = make_player(db, team, "Solo", 4).id

        TeamService(db).delete_team(team.id)

        db.expire_all()
        assert db.get(Player, player_id) is None

    def test_delete_refused_while_matches_reference_team(self, db, league):
        with pytest.raises(InvalidReferenceError):
            TeamService(db).delete_team(league["lions"].id)


class TestPlayers:
    def test_create(self, db, league):
        player = PlayerService(db).create_player(
            player_data(league["lions"], height_cm=180.5, weight_kg=75.0)
        )

        assert player.id is not None
        assert player.team.name == "Lions"
        assert player.height_cm == 180.5

    def test_duplicate_number_in_team(self, db, league):
        with pytest.raises(InvalidReferenceError):
            PlayerService(db).create_player(player_data(league["lions"], number=9))

    def test_same_number_in_other_team(self, db, league):
        outsiders = make_team(db, "Outsiders")

        player = PlayerService(db).create_player(player_data(outsiders, number=9))

        assert player.number == 9

    def test_update_to_taken_number(self, db, league):
        with pytest.raises(InvalidReferenceError):
            PlayerService(db).update_player(
                league["bert"].id, player_data(league["lions"], name="Bert", number=9)
            )

    def test_update_keeping_own_number(self, db, league):
        player = PlayerService(db).update_player(
            league["alan"].id, player_data(league["lions"], name="Alan Smith", number=9)
        )

        assert player.name == "Alan Smith"
        assert player.number == 9

    def test_transfer_to_team_with_free_number(self, db, league):
        player = PlayerService(db).update_player(
            league["bert"].id, player_data(league["tigers"], name="Bert", number=10)
        )

        assert player.team_id == league["tigers"].id

    def test_unknown_team(self, db):
        with pytest.raises(InvalidReferenceError):
            PlayerService(db).create_player({"team_id": 77, "name": "Nobody", "number": 5, "position": "defender"})

    @pytest.mark.parametrize("number", [0, 100])
    def test_number_out_of_range(self, db, league, number):
        with pytest.raises(InvalidInputError):
            PlayerService(db).create_player(player_data(league["lions"], number=number))

    def test_unknown_position(self, db, league):
        with pytest.raises(InvalidInputError):
            PlayerService(db).create_player(player_data(league["lions"], position="winger"))

    def test_list_by_team(self, db, league):
        players = PlayerService(db).list_players_by_team(league["lions"].id)

        assert [p.name for p in players] == ["Alan", "Bert"]

    def test_list_by_missing_team(self, db):
        with pytest.raises(NotFoundError):
            PlayerService(db).list_players_by_team(3)

    def test_delete(self, db, league):
        player_id = league["dave"].id
        service = PlayerService(db)
        service.delete_player(player_id)

        with pytest.raises(NotFoundError):
            service.get_player(player_id)

    def test_delete_scorer_refused(self, db, league):
        make_match(db, league["lions"], league["tigers"], datetime(2025, 4, 1), score=(1, 0),
                   goals=[(league["alan"].id, 10)])

        with pytest.raises(InvalidReferenceError):
            PlayerService(db).delete_player(league["alan"].id)

    def test_scorer_cannot_change_team(self, db, league):
        alan = league["alan"]
        make_match(db, league["lions"], league["tigers"], datetime(2025, 4, 1), score=(1, 0),
                   goals=[(alan.id, 10)])

        with pytest.raises(InvalidReferenceError):
            PlayerService(db).update_player(alan.id, player_data(league["tigers"], name="Alan", number=20))

        db.expire_all()
        assert db.get(Player, alan.id).team_id == league["lions"].id

    def test_scorer_can_change_number_in_same_team(self, db, league):
        alan = league["alan"]
        make_match(db, league["lions"], league["tigers"], datetime(2025, 4, 1), score=(1, 0),
                   goals=[(alan.id, 10)])

        player = PlayerService(db).update_player(alan.id, player_data(league["lions"], name="Alan", number=19))

        assert player.number == 19
