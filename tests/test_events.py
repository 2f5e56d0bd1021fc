from conftest import event_payload


def test_create_event_copies_organizer_profile(client, api):
    organizer = api.organizer()
    event = api.event(organizer)
    assert event["status"] == "published"
    assert event["club_name"] == "Robotics Club"
    assert event["college_name"] == "City College"
    assert event["organizer_id"] == organizer.id
    assert event["interested_sponsor_ids"] == []


def test_new_events_default_to_draft(client, api):
    organizer = api.organizer()
    payload = event_payload()
    del payload["status"]
    r = client.post("/api/events", json=payload, headers=organizer.headers)
    assert r.status_code == 201
    assert r.json()["event"]["status"] == "draft"

    r = client.post("/api/events", json=event_payload(status="sponsored"), headers=organizer.headers)
    assert r.status_code == 400


def test_only_organizers_create_events(client, api):
    sponsor = api.sponsor()
    r = client.post("/api/events", json=event_payload(), headers=sponsor.headers)
    assert r.status_code == 403
    assert client.post("/api/events", json=event_payload()).status_code == 401


def test_event_validation(client, api):
    organizer = api.organizer()
    for bad in (
        event_payload(category="gaming"),
        event_payload(expected_attendees=0),
        event_payload(sponsorship_amount=-1),
        event_payload(title="   "),
    ):
        r = client.post("/api/events", json=bad, headers=organizer.headers)
        assert r.status_code == 400, bad
        assert r.json()["code"] == "VALIDATION_ERROR"


def test_drafts_are_visible_only_to_their_owner(client, api):
    owner = api.organizer()
    other = api.organizer("other@college.edu")
    published = api.event(owner, title="Public Fest")
    draft = api.event(owner, title="Secret Fest", status="draft")

    listed = client.get("/api/events").json()["events"]
    assert [e["id"] for e in listed] == [published["id"]]

    mine = client.get("/api/events/organizer", headers=owner.headers).json()["events"]
    assert [e["id"] for e in mine] == [draft["id"], published["id"]]

    assert client.get(f"/api/events/{draft['id']}").status_code == 404
    assert client.get(f"/api/events/{draft['id']}", headers=other.headers).status_code == 404
    assert client.get(f"/api/events/{draft['id']}", headers=owner.headers).status_code == 200
    assert client.get(f"/api/events/{published['id']}").json()["event"]["title"] == "Public Fest"


def test_public_listing_is_newest_first(client, api):
    organizer = api.organizer()
    first = api.event(organizer, title="First")
    second = api.event(organizer, title="Second")
    listed = client.get("/api/events").json()["events"]
    assert [e["id"] for e in listed] == [second["id"], first["id"]]


def test_update_is_partial_and_owner_only(client, api):
    owner = api.organizer()
    other = api.organizer("other@college.edu")
    event = api.event(owner, status="draft")

    r = client.put(f"/api/events/{event['id']}", json={"venue": "Auditorium"}, headers=other.headers)
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"

    r = client.put(
        f"/api/events/{event['id']}", json={"venue": "Auditorium", "status": "published"}, headers=owner.headers
    )
    assert r.status_code == 200
    updated = r.json()["event"]
    assert updated["venue"] == "Auditorium"
    assert updated["status"] == "published"
    assert updated["title"] == "HackFest"

    assert client.put("/api/events/9999", json={"venue": "X"}, headers=owner.headers).status_code == 404


def test_delete_is_soft_and_owner_only(client, api):
    owner = api.organizer()
    other = api.organizer("other@college.edu")
    event = api.event(owner)

    assert client.delete(f"/api/events/{event['id']}", headers=other.headers).status_code == 403
    r = client.delete(f"/api/events/{event['id']}", headers=owner.headers)
    assert r.status_code == 200

    assert client.get("/api/events").json()["events"] == []
    assert client.get("/api/events/organizer", headers=owner.headers).json()["events"] == []
    assert client.get(f"/api/events/{event['id']}").status_code == 404


def test_event_interest_recorded_once(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    event = api.event(organizer)

    r = client.post(f"/api/events/{event['id']}/interest", headers=sponsor.headers)
    assert r.status_code == 200

    r = client.post(f"/api/events/{event['id']}/interest", headers=sponsor.headers)
    assert r.status_code == 409
    assert r.json()["code"] == "CONFLICT"

    detail = client.get(f"/api/events/{event['id']}").json()["event"]
    assert detail["interested_sponsor_ids"] == [sponsor.id]

    r = client.get(f"/api/events/{event['id']}/interested-sponsors", headers=organizer.headers)
    assert r.status_code == 200
    assert [s["company_name"] for s in r.json()["sponsors"]] == ["Acme Corp"]

    # Event-level interest never opens a deal
    agent = api.agent()
    assert client.get("/api/deals/pending", headers=agent.headers).json()["deals"] == []


def test_event_interest_rules(client, api):
    organizer = api.organizer()
    other = api.organizer("other@college.edu")
    sponsor = api.sponsor()
    draft = api.event(organizer, status="draft")
    event = api.event(organizer)

    assert client.post(f"/api/events/{draft['id']}/interest", headers=sponsor.headers).status_code == 404
    assert client.post(f"/api/events/{event['id']}/interest", headers=organizer.headers).status_code == 403
    assert client.post("/api/events/9999/interest", headers=sponsor.headers).status_code == 404
    r = client.get(f"/api/events/{event['id']}/interested-sponsors", headers=other.headers)
    assert r.status_code == 403


def test_update_rejects_explicit_nulls(client, api):
    organizer = api.organizer()
    event = api.event(organizer)
    url = f"/api/events/{event['id']}"

    for field in ("event_date", "expected_attendees", "sponsorship_amount", "category", "status", "title"):
        r = client.put(url, json={field: None}, headers=organizer.headers)
        assert r.status_code == 400, field
        assert r.json()["code"] == "VALIDATION_ERROR"

    # The event is untouched and listings still render
    assert client.get(url).json()["event"]["event_date"] == event["event_date"]
    assert [e["id"] for e in client.get("/api/events").json()["events"]] == [event["id"]]


def test_organizer_cannot_set_package_driven_status(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    agent = api.agent()
    event = api.event(organizer)
    url = f"/api/events/{event['id']}"

    for status in ("sponsored", "completed", "cancelled"):
        r = client.put(url, json={"status": status}, headers=organizer.headers)
        assert r.status_code == 400, status
    assert client.get(url).json()["event"]["status"] == "published"

    package = api.packages(organizer, event["id"])[0]
    deal = api.interest(sponsor, package["id"])
    assert client.post(f"/api/deals/{deal['id']}/assign", headers=agent.headers).status_code == 200
    r = client.patch(f"/api/deals/{deal['id']}/status", json={"status": "approved"}, headers=agent.headers)
    assert r.status_code == 200
    assert client.get(url).json()["event"]["status"] == "sponsored"

    r = client.put(url, json={"status": "published"}, headers=organizer.headers)
    assert r.status_code == 409
    assert client.get(url).json()["event"]["status"] == "sponsored"
    # Non-status edits still go through
    assert client.put(url, json={"venue": "Main Lawn"}, headers=organizer.headers).status_code == 200
