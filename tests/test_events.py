from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from riders_api.core.security import create_access_token
from riders_api.models.event import Event


def _auth_header(login: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(login)}"}


def _payload(name: str = "Coastal 10K", date: str = "2024-05-01T09:00:00+02:00", **fields) -> dict:
    return {"name": name, "date": date, **fields}


def _create(client, **fields) -> dict:
    response = client.post("/api/events", json=_payload(**fields))
    assert response.status_code == 201
    return response.json()


def test_create_event_returns_location_and_alert(client, db):
    response = client.post(
        "/api/events",
        json=_payload(km=10.0, route="Barceloneta - Port Olimpic", creator="anna"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] is not None
    assert body["name"] == "Coastal 10K"
    assert body["km"] == 10.0
    assert response.headers["Location"] == f"/api/events/{body['id']}"
    assert response.headers["X-lsridersApp-alert"] == "lsridersApp.event.created"
    assert response.headers["X-lsridersApp-params"] == str(body["id"])

    assert db.get(Event, body["id"]) is not None


def test_create_event_with_id_is_bad_request(client, db):
    response = client.post("/api/events", json=_payload(id=5))

    assert response.status_code == 400
    assert response.headers["X-lsridersApp-error"] == "error.idexists"
    assert db.query(Event).count() == 0


def test_create_event_validates_payload(client):
    response = client.post("/api/events", json={"name": "", "date": "not a date"})
    assert response.status_code == 422


def test_update_event(client):
    created = _create(client, km=10.0)

    response = client.put("/api/events", json={**created, "name": "Coastal 12K", "km": 12.0})

    assert response.status_code == 200
    assert response.json()["name"] == "Coastal 12K"
    assert response.headers["X-lsridersApp-alert"] == "lsridersApp.event.updated"
    assert client.get(f"/api/events/{created['id']}").json()["km"] == 12.0


def test_update_event_without_id_is_bad_request(client):
    response = client.put("/api/events", json=_payload())

    assert response.status_code == 400
    assert response.headers["X-lsridersApp-error"] == "error.idnull"


def test_update_missing_event_is_not_found(client):
    response = client.put("/api/events", json=_payload(id=9999))

    assert response.status_code == 404
    assert client.get("/api/events").json() == []


def test_get_event_and_not_found(client):
    created = _create(client, route="Seafront")

    response = client.get(f"/api/events/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created

    missing = client.get("/api/events/9999")
    assert missing.status_code == 404


def test_delete_event_is_idempotent(client):
    created = _create(client)

    first = client.delete(f"/api/events/{created['id']}")
    assert first.status_code == 200
    assert first.headers["X-lsridersApp-alert"] == "lsridersApp.event.deleted"

    assert client.get(f"/api/events/{created['id']}").status_code == 404
    assert client.delete(f"/api/events/{created['id']}").status_code == 200
    assert client.delete("/api/events/123456").status_code == 200


def test_list_events_paginates_and_sorts(client):
    for km in (5.0, 21.0, 10.0):
        _create(client, name=f"{km:g}K", km=km)

    response = client.get("/api/events", params={"page": 0, "size": 2, "sort": "km,desc"})

    assert response.status_code == 200
    assert response.headers["X-Total-Count"] == "3"
    assert [e["km"] for e in response.json()] == [21.0, 10.0]

    second = client.get("/api/events", params={"page": 1, "size": 2, "sort": "km,desc"})
    assert [e["km"] for e in second.json()] == [5.0]


def test_list_events_rejects_negative_paging_and_unknown_sort(client):
    assert client.get("/api/events", params={"page": -1}).status_code == 400
    assert client.get("/api/events", params={"size": -1}).status_code == 400

    response = client.get("/api/events", params={"sort": "password"})
    assert response.status_code == 400
    assert response.headers["X-lsridersApp-error"] == "error.sortinvalid"


def test_list_event_summaries(client):
    _create(client, name="Long", km=42.0, route="Collserola", description="hills", creator="anna")
    _create(client, name="Short", km=5.0, route="Park", description="flat")

    response = client.get("/api/events-dto")

    assert response.status_code == 200
    assert response.json() == [
        {"name": "Short", "km": 5.0, "route": "Park", "description": "flat"},
        {"name": "Long", "km": 42.0, "route": "Collserola", "description": "hills"},
    ]


def test_date_filters(client):
    created = _create(client, date="2024-05-01T00:00:00+02:00")

    after = client.get("/api/events/dateAfter/", params={"dateString": "2024-04-30"})
    before = client.get("/api/events/dateBefore/", params={"dateString": "2024-04-30"})

    assert after.status_code == 200
    assert [e["id"] for e in after.json()] == [created["id"]]
    assert before.status_code == 200
    assert before.json() == []

    # start of the same day is neither before nor after
    same_day = client.get("/api/events/dateAfter/", params={"dateString": "2024-05-01"})
    assert same_day.json() == []


def test_date_filter_rejects_bad_format(client):
    response = client.get("/api/events/dateBefore/", params={"dateString": "01/05/2024"})

    assert response.status_code == 400
    assert response.headers["X-lsridersApp-error"] == "error.dateformat"


def test_list_by_name(client):
    route_a = _create(client, name="Route-A")
    _create(client, name="Route-B")

    response = client.get("/api/events/by-Name/Route-A")

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [route_a["id"]]
    assert client.get("/api/events/by-Name/Nowhere").json() == []


def test_list_my_events(client):
    mine = _create(client, name="Mine", creator="anna")
    _create(client, name="Theirs", creator="bob")

    response = client.get("/api/events/mine", headers=_auth_header("anna"))

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [mine["id"]]


def test_list_my_events_requires_token(client):
    assert client.get("/api/events/mine").status_code in {401, 403}

    bad = client.get("/api/events/mine", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_coastal_10k_scenario(client):
    created = _create(client, name="Coastal 10K", date="2024-05-01T00:00:00+02:00")
    event_id = created["id"]

    fetched = client.get(f"/api/events/{event_id}").json()
    assert fetched["name"] == "Coastal 10K"

    after = client.get("/api/events/dateAfter/", params={"dateString": "2024-04-30"}).json()
    before = client.get("/api/events/dateBefore/", params={"dateString": "2024-04-30"}).json()
    assert event_id in [e["id"] for e in after]
    assert event_id not in [e["id"] for e in before]

    client.delete(f"/api/events/{event_id}")
    assert client.get(f"/api/events/{event_id}").status_code == 404


def test_ids_and_pages_beyond_64_bits(client):
    huge = 99999999999999999999

    assert client.get(f"/api/events/{huge}").status_code == 404
    assert client.delete(f"/api/events/{huge}").status_code == 200
    assert client.put("/api/events", json=_payload(id=huge)).status_code == 404

    response = client.get("/api/events", params={"page": 10**18, "size": 20})
    assert response.status_code == 200
    assert response.json() == []
    assert response.headers["X-Total-Count"] == "0"


def test_storage_failure_is_service_unavailable(client, monkeypatch):
    def _failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", _failing_commit)
    response = client.post("/api/events", json=_payload())

    assert response.status_code == 503
    assert response.headers["X-lsridersApp-error"] == "error.storage"
    monkeypatch.undo()

    assert client.get("/api/events").json() == []
