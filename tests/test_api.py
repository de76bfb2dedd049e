from callfsm import CallEvent, CallState


def _create(client, **body):
    response = client.post("/calls", json=body)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_transitions_lists_default_flow(client):
    body = client.get("/transitions").json()

    assert body["initial_state"] == "IDLE"
    assert len(body["transitions"]) == 7
    assert {"from_state": "DISCONNECTED", "event": "RESET", "to_state": "IDLE"} in body["transitions"]


def test_create_and_get_call(client):
    created = _create(client, caller_id="+15550000")

    response = client.get(f"/calls/{created['id']}")

    assert response.status_code == 200
    assert response.json()["state"] == "IDLE"
    assert response.json()["context"]["caller_id"] == "+15550000"


def test_full_call_over_http(client):
    call_id = _create(client)["id"]

    for event, expected in [("INCOMING", "RINGING"), ("ANSWER", "CONNECTED"), ("HANG_UP", "DISCONNECTED")]:
        response = client.post(f"/calls/{call_id}/events", json={"event": event})
        assert response.status_code == 200
        assert response.json()["state"] == expected


def test_invalid_transition_is_conflict(client):
    call_id = _create(client)["id"]

    response = client.post(f"/calls/{call_id}/events", json={"event": "ANSWER"})

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "invalid_transition"
    assert (detail["state"], detail["event"]) == ("IDLE", "ANSWER")
    assert client.get(f"/calls/{call_id}").json()["state"] == "IDLE"


def test_action_failure_is_unprocessable(client, registry):
    def refuse(state, event, context):
        raise RuntimeError("line busy")

    registry.table = registry.table.copy().register(CallState.IDLE, CallEvent.DIAL, refuse)
    call_id = _create(client)["id"]

    response = client.post(f"/calls/{call_id}/events", json={"event": "DIAL"})

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "action_failed"
    assert response.json()["detail"]["message"] == "line busy"


def test_unknown_event_name_is_rejected(client):
    call_id = _create(client)["id"]

    response = client.post(f"/calls/{call_id}/events", json={"event": "TELEPORT"})

    assert response.status_code == 422


def test_unknown_call_is_not_found(client):
    assert client.get("/calls/nope").status_code == 404
    assert client.post("/calls/nope/events", json={"event": "DIAL"}).status_code == 404
    assert client.delete("/calls/nope").status_code == 404


def test_list_and_delete(client):
    first = _create(client)["id"]
    _create(client)
    client.post(f"/calls/{first}/events", json={"event": "DIAL"})

    dialing = client.get("/calls", params={"state": "DIALING"}).json()
    assert dialing["count"] == 1
    assert dialing["calls"][0]["id"] == first

    assert client.delete(f"/calls/{first}").status_code == 204
    assert client.get("/calls").json()["count"] == 1


def test_full_registry_is_unavailable(client):
    for _ in range(5):
        _create(client)

    assert client.post("/calls", json={}).status_code == 503


def test_negative_limit_is_rejected(client):
    for _ in range(3):
        _create(client)

    assert client.get("/calls", params={"limit": -1}).status_code == 422
    assert client.get("/calls", params={"limit": 3}).json()["count"] == 3


def test_concurrent_events_on_one_call_are_serialised(client):
    from concurrent.futures import ThreadPoolExecutor

    call_id = _create(client)["id"]

    def dial(_):
        return client.post(f"/calls/{call_id}/events", json={"event": "DIAL"}).status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = sorted(pool.map(dial, range(8)))

    assert codes == [200] + [409] * 7
    body = client.get(f"/calls/{call_id}").json()
    assert body["state"] == "DIALING"
    assert body["context"]["transitions"] == 1
