from __future__ import annotations

import pytest

import main
from main import app


@pytest.fixture
def client():
    app.config.update(TESTING=True, DEFAULT_SIZE=16)
    with app.test_client() as client:
        yield client


def test_index_renders(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert b"Sort Race Visualizer" in response.data


def test_state_payload(client) -> None:
    data = client.get("/api/state").get_json()

    assert data["size"] == 16
    assert data["lanes"]["left"]["algorithm"] == "quick"
    assert data["lanes"]["right"]["algorithm"] == "merge"
    assert data["timeline"]["latest_step"] == 0
    assert data["is_playing"] is False
    assert data["left_svg"].startswith("<svg")


def test_state_is_kept_per_browser(client) -> None:
    client.post("/api/step")
    assert client.get("/api/state").get_json()["timeline"]["latest_step"] == 1

    with app.test_client() as other:
        assert other.get("/api/state").get_json()["timeline"]["latest_step"] == 0


def test_step_and_advance(client) -> None:
    step = client.post("/api/step").get_json()
    assert step["recorded"] == 1
    assert step["active_entry"]["did_left_step"] is True

    advance = client.post("/api/advance", json={"left": 3, "right": 1}).get_json()
    assert advance["recorded"] == 3
    assert advance["timeline"]["latest_step"] == 4
    assert advance["lanes"]["right"]["state"]["metrics"]["steps"] == 2


def test_generate_is_reproducible(client) -> None:
    first = client.post("/api/generate", json={"size": 20, "pattern": "few-unique", "seed": 42}).get_json()
    second = client.post("/api/generate", json={"size": 20, "pattern": "few-unique", "seed": "42"}).get_json()

    assert first["seed"] == second["seed"] == 42
    assert first["size"] == 20
    assert first["lanes"]["left"]["state"]["array"] == second["lanes"]["left"]["state"]["array"]


def test_generate_rejects_bad_input(client) -> None:
    assert client.post("/api/generate", json={"pattern": "zigzag"}).status_code == 400
    assert client.post("/api/generate", json={"size": "lots"}).status_code == 400
    assert client.post("/api/generate", json={"size": 1}).status_code == 400


def test_algorithm_swap(client) -> None:
    client.post("/api/step")
    data = client.post("/api/algorithm", json={"lane": "left", "algo_key": "insertion"}).get_json()

    assert data["lanes"]["left"]["algorithm"] == "insertion"
    assert data["timeline"]["latest_step"] == 0
    assert "def insertion_sort(a):" in data["left_code"]


def test_algorithm_swap_rejects_bad_input(client) -> None:
    bad_lane = client.post("/api/algorithm", json={"lane": "middle", "algo_key": "bubble"})
    assert bad_lane.status_code == 400
    assert "Unknown lane" in bad_lane.get_json()["error"]

    bad_algo = client.post("/api/algorithm", json={"lane": "right", "algo_key": "bogo"})
    assert bad_algo.status_code == 400


def test_timeline_navigation(client) -> None:
    client.post("/api/advance", json={"left": 5, "right": 5})

    assert client.post("/api/timeline/scrub", json={"step": 2}).get_json()["timeline"]["cursor_step"] == 2
    assert client.post("/api/timeline/back").get_json()["timeline"]["cursor_step"] == 1
    assert client.post("/api/timeline/forward").get_json()["timeline"]["cursor_step"] == 2

    latest = client.post("/api/timeline/latest").get_json()
    assert latest["timeline"]["cursor_step"] == 5
    assert latest["timeline"]["is_live"] is True


def test_every_navigation_route_pauses_playback(client) -> None:
    client.post("/api/advance", json={"left": 5, "right": 5})
    for route in ("/api/timeline/back", "/api/timeline/forward", "/api/timeline/latest"):
        assert client.post("/api/play").get_json()["is_playing"] is True
        assert client.post(route).get_json()["is_playing"] is False

    assert client.post("/api/play").get_json()["is_playing"] is True
    assert client.post("/api/timeline/scrub", json={"step": 1}).get_json()["is_playing"] is False


def test_finished_race_replays_from_history(client) -> None:
    client.post("/api/generate", json={"size": 2, "seed": 1})
    client.post("/api/advance", json={"left": 50, "right": 50})
    assert client.post("/api/play").get_json()["is_playing"] is False

    client.post("/api/timeline/scrub", json={"step": 0})
    assert client.post("/api/play").get_json()["is_playing"] is True


def test_race_store_evicts_least_recently_used(client) -> None:
    app.config["MAX_SLOTS"] = 3
    try:
        main._SLOTS.clear()
        client.post("/api/advance", json={"left": 2})
        for _ in range(3):
            with app.test_client() as other:
                other.get("/api/state")
            client.get("/api/state")

        assert len(main._SLOTS) == 3
        assert client.get("/api/state").get_json()["timeline"]["latest_step"] == 2

        for _ in range(3):
            with app.test_client() as other:
                other.get("/api/state")
        assert len(main._SLOTS) == 3
        assert client.get("/api/state").get_json()["timeline"]["latest_step"] == 0
    finally:
        app.config["MAX_SLOTS"] = 256


def test_reset_keeps_the_dataset(client) -> None:
    before = client.post("/api/advance", json={"left": 4}).get_json()
    after = client.post("/api/reset").get_json()

    assert after["seed"] == before["seed"]
    assert after["timeline"]["latest_step"] == 0


def test_play_toggle_and_frame(client) -> None:
    assert client.post("/api/play").get_json()["is_playing"] is True
    frame = client.post("/api/frame").get_json()
    assert frame["recorded"] == 0
    assert client.post("/api/play").get_json()["is_playing"] is False


def test_speed_and_lockstep_config(client) -> None:
    assert client.post("/api/config/speed", json={"speed": "fast"}).get_json()["speed"] == 90
    assert client.post("/api/config/speed", json={"speed": 12}).get_json()["speed"] == 12
    assert client.post("/api/config/speed", json={"speed": "warp"}).status_code == 400
    assert client.post("/api/config/lockstep", json={"lockstep": False}).get_json()["lockstep"] is False
