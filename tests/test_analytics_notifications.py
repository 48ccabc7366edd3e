import models


def test_event_analytics_endpoint(client, organizer, make_user, make_event, headers_for):
    event_id = make_event(organizer, capacity=1, price=299)
    client.post(f"/api/registrations/{event_id}", headers=headers_for(make_user()))
    client.post(f"/api/registrations/{event_id}", headers=headers_for(make_user()))

    resp = client.get(f"/api/analytics/events/{event_id}", headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 200
    assert resp.json() == {"event_id": event_id, "registrations_count": 1, "revenue": 299}

    detail = client.get(f"/api/events/{event_id}").json()
    assert detail["registrations_count"] == 2
    assert detail["analytics"]["registrations_count"] == 1


def test_event_analytics_access(client, make_user, headers_for, organizer):
    assert client.get("/api/analytics/events/1", headers=headers_for(make_user())).status_code == 403
    resp = client.get("/api/analytics/events/777", headers=headers_for(organizer, models.Role.ORGANIZER))
    assert resp.status_code == 404


def test_overview_admin_only(client, organizer, make_user, make_event, headers_for):
    event_id = make_event(organizer)
    student = make_user()
    admin = make_user(models.Role.ADMIN)
    client.post(f"/api/registrations/{event_id}", headers=headers_for(student))

    assert client.get("/api/analytics/overview", headers=headers_for(organizer, models.Role.ORGANIZER)).status_code == 403
    resp = client.get("/api/analytics/overview", headers=headers_for(admin, models.Role.ADMIN))
    assert resp.status_code == 200
    assert resp.json() == {"events": 1, "users": 3, "registrations": 1}


def test_notifications_newest_first(client, organizer, make_user, make_event, headers_for):
    full = make_event(organizer, capacity=1, day=1, title="Music Night")
    open_event = make_event(organizer, day=2, title="Alumni Meet")
    holder, student = make_user(), make_user()
    client.post(f"/api/registrations/{full}", headers=headers_for(holder))
    client.post(f"/api/registrations/{full}", headers=headers_for(student))
    client.post(f"/api/registrations/{open_event}", headers=headers_for(student))

    resp = client.get("/api/notifications", headers=headers_for(student))
    assert resp.status_code == 200
    assert [n["message"] for n in resp.json()] == [
        "You're confirmed for Alumni Meet.",
        "Music Night is full. You've been added to the waitlist.",
    ]
    assert client.get("/api/notifications").status_code == 401


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
