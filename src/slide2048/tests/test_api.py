"""
Tests for the HTTP API.

Tests:
- New game creation and settings validation
- Moves: effective, ineffective, winning, losing
- Board status evaluation
- Error handling for malformed boards
"""

import importlib

import pytest
from fastapi.testclient import TestClient

from .. import api
from ..api import app, limiter


@pytest.fixture
def client():
    enabled = limiter.enabled
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = enabled


def count_tiles(board):
    return sum(1 for row in board for value in row if value)


class TestNewGame:

    def test_defaults(self, client):
        response = client.post("/game/new", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["board_size"] == 4
        assert data["win_tile"] == 2048
        assert data["score"] == 0
        assert data["progress"] == "playing"
        assert len(data["board"]) == 4
        assert count_tiles(data["board"]) == 2

    def test_custom_settings(self, client):
        data = client.post("/game/new", json={"size": 3, "win_tile": 64}).json()
        assert data["board_size"] == 3
        assert data["win_tile"] == 64
        assert all(len(row) == 3 for row in data["board"])

    def test_size_below_two_rejected(self, client):
        assert client.post("/game/new", json={"size": 1}).status_code == 422

    def test_oversized_board_rejected(self, client):
        assert client.post("/game/new", json={"size": 100000}).status_code == 422

    def test_non_power_of_two_target_rejected(self, client):
        response = client.post("/game/new", json={"win_tile": 1000})
        assert response.status_code == 400
        assert "power of two" in response.json()["detail"]


class TestMove:

    def test_effective_move(self, client):
        board = [[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
        response = client.post("/game/move", json={
            "board": board, "score": 10, "direction": "left", "win_tile": 2048,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["move_was_effective"] is True
        assert data["gained_score"] == 4
        assert data["score"] == 14
        assert data["board"][0][0] == 4
        assert count_tiles(data["board"]) == 2
        assert data["progress"] == "playing"
        assert data["message"] is None

    def test_ineffective_move_echoes_state(self, client):
        board = [[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
        data = client.post("/game/move", json={
            "board": board, "score": 10, "direction": "left", "win_tile": 2048,
        }).json()
        assert data["move_was_effective"] is False
        assert data["gained_score"] == 0
        assert data["board"] == board
        assert data["score"] == 10
        assert "not effective" in data["message"]

    def test_winning_move(self, client):
        board = [[1024, 1024], [0, 0]]
        data = client.post("/game/move", json={
            "board": board, "score": 0, "direction": "right", "win_tile": 2048,
        }).json()
        assert data["board"][0][1] == 2048
        assert data["progress"] == "won"
        assert data["message"] == "Congratulations! You won!"

    def test_keep_playing_after_win(self, client):
        board = [[2048, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
        data = client.post("/game/move", json={
            "board": board, "score": 0, "direction": "down", "win_tile": 2048, "keep_playing": True,
        }).json()
        assert data["progress"] == "playing"

    def test_losing_board(self, client):
        board = [[2, 4], [4, 2]]
        data = client.post("/game/move", json={
            "board": board, "score": 0, "direction": "up", "win_tile": 2048,
        }).json()
        assert data["move_was_effective"] is False
        assert data["progress"] == "lost"
        assert data["message"] == "Game Over. No more valid moves."

    def test_unknown_direction(self, client):
        response = client.post("/game/move", json={
            "board": [[2, 0], [0, 0]], "score": 0, "direction": "sideways", "win_tile": 2048,
        })
        assert response.status_code == 422

    @pytest.mark.parametrize("board", [
        [[2, 0], [0]],
        [[3, 0], [0, 0]],
        [[2]],
        [],
    ])
    def test_invalid_board(self, client, board):
        response = client.post("/game/move", json={
            "board": board, "score": 0, "direction": "left", "win_tile": 2048,
        })
        assert response.status_code == 400
        assert "Invalid board" in response.json()["detail"]

    def test_negative_score_rejected(self, client):
        response = client.post("/game/move", json={
            "board": [[2, 0], [0, 0]], "score": -1, "direction": "left", "win_tile": 2048,
        })
        assert response.status_code == 422


class TestBoardStatus:

    def test_stuck_board(self, client):
        data = client.post("/game/status", json={"board": [[2, 4], [4, 2]]}).json()
        assert data == {
            "progress": "lost",
            "reached_target": False,
            "moves_available": False,
            "max_tile": 4,
        }

    def test_reached_target(self, client):
        data = client.post("/game/status", json={"board": [[0, 0], [0, 64]], "win_tile": 64}).json()
        assert data["progress"] == "won"
        assert data["reached_target"] is True
        assert data["moves_available"] is True

    def test_bad_target(self, client):
        response = client.post("/game/status", json={"board": [[0, 0], [0, 64]], "win_tile": 3})
        assert response.status_code == 400


def test_import_ignores_game_settings(monkeypatch):
    monkeypatch.setenv("SLIDE2048_BOARD_SIZE", "four")
    monkeypatch.setenv("SLIDE2048_LOG_LEVEL", "TRACE")
    monkeypatch.setenv("SLIDE2048_RATE_LIMIT", "7/minute")
    try:
        reloaded = importlib.reload(api)
        assert reloaded.api_settings.rate_limit == "7/minute"
    finally:
        monkeypatch.undo()
        importlib.reload(api)
