"""Tests for DAL persistence models."""

import pytest
from pydantic import ValidationError

from shared.dal.models import Game, GameStatus, PageList, Player, PlayerDecision, User


class TestUser:
    def test_defaults(self):
        user = User(id="u1", login="alice")
        assert user.first_name == ""
        assert user.last_name == ""
        assert user.games_played == 0
        assert user.current_game_id is None

    def test_id_is_immutable(self):
        user = User(id="u1", login="alice")
        with pytest.raises(ValidationError):
            user.id = "u2"

    def test_mutation_in_place_is_validated(self):
        user = User(id="u1", login="alice")
        user.login = "bob"
        assert user.login == "bob"
        with pytest.raises(ValidationError):
            user.games_played = -1

    def test_value_equality(self):
        assert User(id="u1", login="alice") == User(id="u1", login="alice")
        assert User(id="u1", login="alice") != User(id="u1", login="alice", games_played=1)


class TestGame:
    def test_defaults(self):
        game = Game(id="g1")
        assert game.status == GameStatus.NOT_STARTED
        assert game.current_turn_index == 0
        assert game.players == []

    def test_games_do_not_share_player_lists(self):
        first, second = Game(id="g1"), Game(id="g2")
        first.players.append(Player(user_id="u1", name="alice"))
        assert second.players == []

    def test_negative_score_rejected(self):
        with pytest.raises(ValidationError):
            Player(user_id="u1", name="alice", decision=PlayerDecision.ROCK, score=-1)


class TestPageList:
    def test_first_page_of_many(self):
        page = PageList[int](items=list(range(10)), current_page=1, page_size=10, total_count=42)
        assert page.total_pages == 5
        assert page.has_previous is False
        assert page.has_next is True

    def test_last_page(self):
        page = PageList[int](items=[40, 41], current_page=5, page_size=10, total_count=42)
        assert page.has_previous is True
        assert page.has_next is False

    def test_empty_collection(self):
        page = PageList[int](items=[], current_page=1, page_size=10, total_count=0)
        assert page.total_pages == 0
        assert page.has_previous is False
        assert page.has_next is False

    def test_page_number_must_be_positive(self):
        with pytest.raises(ValidationError):
            PageList[int](items=[], current_page=0, page_size=10, total_count=0)
