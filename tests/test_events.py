import models

EVENT = {
    "title": "<b>Hack Night</b>",
    "description": "Build things",
    "venue": "Tech Park",
    "category": "Tech",
    "start_time": "2030-03-04T10:00:00",
    "end_time": "2030-03-04T12:00:00",
    "capacity": 50,
    "price": 99,
    "price_type": "paid",
}


def test_create_event_as_organizer(client, organizer, headers_for, session_factory):
    resp = client.post("/api/events", json=EVENT, headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Hack Night"
    assert body["organizer_id"] == organizer
    assert body["registrations_count"] == 0
    assert body["analytics"]["registrations_count"] == 0
    assert body["analytics"]["revenue"] == 0

    with session_factory() as db:
        assert db.query(models.Analytics).filter(models.Analytics.event_id == body["id"]).count() == 1


def test_create_event_timezone_is_normalized(client, organizer, headers_for):
    payload = dict(EVENT, start_time="2030-03-04T10:00:00+05:30", end_time="2030-03-04T12:00:00+05:30")
    resp = client.post("/api/events", json=payload, headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 201
    assert resp.json()["start_time"].startswith("2030-03-04T04:30:00")


def test_student_cannot_create_event(client, make_user, headers_for):
    student = make_user()
    resp = client.post("/api/events", json=EVENT, headers=headers_for(student))
    assert resp.status_code == 403
    assert resp.json()["error"] == "Forbidden"


def test_create_event_rejects_bad_values(client, organizer, headers_for):
    headers = headers_for(organizer, models.Role.ORGANIZER)
    bad_range = dict(EVENT, start_time="2030-03-04T12:00:00", end_time="2030-03-04T10:00:00")
    assert client.post("/api/events", json=bad_range, headers=headers).status_code == 422
    assert client.post("/api/events", json=dict(EVENT, capacity=0), headers=headers).status_code == 422
    assert client.post("/api/events", json=dict(EVENT, price=-1), headers=headers).status_code == 422


def test_list_events_filters_and_orders(client, organizer, make_event):
    make_event(organizer, day=2, title="Music Night", category="Cultural", venue="Main Auditorium")
    make_event(organizer, day=1, title="AI Bootcamp", category="Tech")
    make_event(organizer, day=3, title="Cricket", category="Sports", venue="Sports Complex")

    resp = client.get("/api/events")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert [e["title"] for e in body["items"]] == ["AI Bootcamp", "Music Night", "Cricket"]

    by_category = client.get("/api/events", params={"category": "Sports"}).json()
    assert [e["title"] for e in by_category["items"]] == ["Cricket"]

    by_text = client.get("/api/events", params={"q": "auditorium"}).json()
    assert [e["title"] for e in by_text["items"]] == ["Music Night"]

    paged = client.get("/api/events", params={"size": 2, "page": 2}).json()
    assert [e["title"] for e in paged["items"]] == ["Cricket"]


def test_event_detail_and_not_found(client, organizer, make_event):
    event_id = make_event(organizer, title="Dance Workshop")
    resp = client.get(f"/api/events/{event_id}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Dance Workshop"
    assert resp.json()["organizer"]["email"] == "organizer1@campus.edu"

    resp = client.get("/api/events/9999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "NotFound", "message": "Event not found"}


def test_update_event_owner_only(client, organizer, make_user, make_event, headers_for):
    event_id = make_event(organizer)
    other = make_user(models.Role.ORGANIZER)
    admin = make_user(models.Role.ADMIN)

    resp = client.put(f"/api/events/{event_id}", json={"title": "Stolen"},
                      headers=headers_for(other, models.Role.ORGANIZER))
    assert resp.status_code == 403

    resp = client.put(f"/api/events/{event_id}", json={"capacity": 5, "venue": "Library Hall"},
                      headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 200
    assert resp.json()["capacity"] == 5
    assert resp.json()["venue"] == "Library Hall"

    resp = client.put(f"/api/events/{event_id}", json={"title": "Admin edit"},
                      headers=headers_for(admin, models.Role.ADMIN))
    assert resp.status_code == 200
    assert resp.json()["title"] == "Admin edit"


def test_update_event_rechecks_time_range(client, organizer, make_event, headers_for):
    event_id = make_event(organizer, start_hour=10, end_hour=11)
    resp = client.put(f"/api/events/{event_id}", json={"end_time": "2030-03-04T09:00:00"},
                      headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidInput"


def test_delete_event_cascades(client, organizer, make_user, make_event, headers_for, session_factory):
    event_id = make_event(organizer, capacity=1)
    student = make_user()
    assert client.post(f"/api/registrations/{event_id}", headers=headers_for(student)).status_code == 201

    resp = client.delete(f"/api/events/{event_id}", headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 204

    with session_factory() as db:
        assert db.get(models.Event, event_id) is None
        assert db.query(models.Analytics).count() == 0
        assert db.query(models.Registration).count() == 0


def test_update_event_capacity_cannot_drop_below_confirmed(client, session_factory, organizer, make_user,
                                                           make_event, headers_for):
    event_id = make_event(organizer, capacity=3)
    for student in [make_user(), make_user()]:
        assert client.post(f"/api/registrations/{event_id}", headers=headers_for(student)).status_code == 201

    headers = headers_for(organizer, models.Role.ORGANIZER)
    resp = client.put(f"/api/events/{event_id}", json={"capacity": 1}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidInput"

    with session_factory() as db:
        assert db.get(models.Event, event_id).capacity == 3

    resp = client.put(f"/api/events/{event_id}", json={"capacity": 2}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["capacity"] == 2


def test_update_event_capacity_increase_promotes_waitlist(client, session_factory, organizer, make_user,
                                                          make_event, headers_for):
    event_id = make_event(organizer, capacity=1, price=10, title="Dance Workshop")
    students = [make_user() for _ in range(4)]
    for student in students:
        assert client.post(f"/api/registrations/{event_id}", headers=headers_for(student)).status_code == 201

    resp = client.put(f"/api/events/{event_id}", json={"capacity": 3},
                      headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 200

    with session_factory() as db:
        statuses = {
            r.user_id: r.status
            for r in db.query(models.Registration).filter_by(event_id=event_id)
        }
        assert [statuses[s] for s in students] == [
            models.RegistrationStatus.CONFIRMED,
            models.RegistrationStatus.CONFIRMED,
            models.RegistrationStatus.CONFIRMED,
            models.RegistrationStatus.WAITLIST,
        ]
        stats = db.query(models.Analytics).filter_by(event_id=event_id).one()
        assert stats.registrations_count == 3
        assert stats.revenue == 30
        messages = [n.message for n in db.query(models.Notification).filter_by(user_id=students[2])]
    assert "A seat opened up: you're confirmed for Dance Workshop." in messages


def test_update_event_time_rejects_registrant_conflict(client, session_factory, organizer, make_user,
                                                       make_event, headers_for):
    morning = make_event(organizer, start_hour=10, end_hour=11)
    afternoon = make_event(organizer, start_hour=14, end_hour=15)
    student = make_user()
    for event_id in (morning, afternoon):
        assert client.post(f"/api/registrations/{event_id}", headers=headers_for(student)).status_code == 201

    headers = headers_for(organizer, models.Role.ORGANIZER)
    resp = client.put(f"/api/events/{afternoon}",
                      json={"start_time": "2030-03-04T10:30:00", "end_time": "2030-03-04T11:30:00"},
                      headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "ScheduleConflict"

    with session_factory() as db:
        assert db.get(models.Event, afternoon).start_time.hour == 14

    resp = client.put(f"/api/events/{afternoon}",
                      json={"start_time": "2030-03-04T16:00:00", "end_time": "2030-03-04T17:00:00"},
                      headers=headers)
    assert resp.status_code == 200
    assert resp.json()["start_time"].startswith("2030-03-04T16:00:00")
