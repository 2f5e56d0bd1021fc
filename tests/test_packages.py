def test_packages_are_numbered_in_order(client, api):
    organizer = api.organizer()
    event = api.event(organizer)
    packages = api.packages(organizer, event["id"], amounts=(25000, 10000, 5000))

    assert [(p["package_number"], p["amount"]) for p in packages] == [(1, 25000), (2, 10000), (3, 5000)]
    assert all(p["status"] == "available" for p in packages)

    listed = client.get(f"/api/events/{event['id']}/packages").json()["packages"]
    assert [p["id"] for p in listed] == [p["id"] for p in packages]


def test_package_validation_and_ownership(client, api):
    owner = api.organizer()
    other = api.organizer("other@college.edu")
    event = api.event(owner)
    url = f"/api/events/{event['id']}/packages"

    assert client.post(url, json={"packages": []}, headers=owner.headers).status_code == 400
    r = client.post(url, json={"packages": [{"amount": 0, "deliverables": "Banner"}]}, headers=owner.headers)
    assert r.status_code == 400
    r = client.post(url, json={"packages": [{"amount": 100, "deliverables": "  "}]}, headers=owner.headers)
    assert r.status_code == 400
    r = client.post(url, json={"packages": [{"amount": 100, "deliverables": "Banner"}]}, headers=other.headers)
    assert r.status_code == 403
    r = client.post(
        "/api/events/9999/packages", json={"packages": [{"amount": 100, "deliverables": "Banner"}]},
        headers=owner.headers,
    )
    assert r.status_code == 404


def test_replacing_packages_drops_old_interest(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    event = api.event(organizer)
    old = api.packages(organizer, event["id"], amounts=(10000,))
    deal = api.interest(sponsor, old[0]["id"])

    new = api.packages(organizer, event["id"], amounts=(12000, 6000))
    assert [p["package_number"] for p in new] == [1, 2]
    assert all(p["interested_sponsor_ids"] == [] for p in new)

    r = client.get(f"/api/deals/{deal['id']}", headers=sponsor.headers)
    assert r.status_code == 200
    assert r.json()["deal"]["package_id"] is None
    assert r.json()["deal"]["event_id"] == event["id"]


def test_package_interest_opens_pending_deal(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    event = api.event(organizer)
    package = api.packages(organizer, event["id"], amounts=(10000,))[0]

    deal = api.interest(sponsor, package["id"])
    assert deal["status"] == "pending"
    assert deal["agent_id"] is None
    assert deal["proposed_amount"] == 10000
    assert deal["organizer_id"] == organizer.id
    assert deal["sponsor_id"] == sponsor.id
    assert deal["package"]["package_number"] == 1
    assert deal["event"]["title"] == "HackFest"

    chat = client.get(f"/api/deals/{deal['id']}/chat", headers=sponsor.headers).json()["messages"]
    assert len(chat) == 1
    assert chat[0]["sender_role"] == "sponsor"
    assert chat[0]["message"].startswith("Interested in Package 1")
    assert chat[0]["amount"] == 10000

    r = client.post(f"/api/packages/{package['id']}/interest", headers=sponsor.headers)
    assert r.status_code == 409

    listed = client.get(f"/api/events/{event['id']}/packages").json()["packages"]
    assert listed[0]["interested_sponsor_ids"] == [sponsor.id]


def test_package_interest_requires_visible_event(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    draft = api.event(organizer, status="draft")
    package = api.packages(organizer, draft["id"])[0]

    assert client.post(f"/api/packages/{package['id']}/interest", headers=sponsor.headers).status_code == 404
    assert client.post("/api/packages/9999/interest", headers=sponsor.headers).status_code == 404
    assert client.post(f"/api/packages/{package['id']}/interest", headers=organizer.headers).status_code == 403


def test_withdraw_cancels_unassigned_deal(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    event = api.event(organizer)
    package = api.packages(organizer, event["id"])[0]
    deal = api.interest(sponsor, package["id"])

    r = client.delete(f"/api/packages/{package['id']}/interest", headers=sponsor.headers)
    assert r.status_code == 200

    r = client.get(f"/api/deals/{deal['id']}", headers=sponsor.headers)
    assert r.json()["deal"]["status"] == "cancelled"
    agent = api.agent()
    assert client.get("/api/deals/pending", headers=agent.headers).json()["deals"] == []

    assert client.delete(f"/api/packages/{package['id']}/interest", headers=sponsor.headers).status_code == 404

    # Interest can be expressed again afterwards
    again = api.interest(sponsor, package["id"])
    assert again["id"] != deal["id"]


def test_withdraw_refused_once_agent_assigned(client, api):
    organizer = api.organizer()
    sponsor = api.sponsor()
    event = api.event(organizer)
    package = api.packages(organizer, event["id"])[0]
    deal = api.interest(sponsor, package["id"])
    agent = api.agent()
    assert client.post(f"/api/deals/{deal['id']}/assign", headers=agent.headers).status_code == 200

    r = client.delete(f"/api/packages/{package['id']}/interest", headers=sponsor.headers)
    assert r.status_code == 409


def test_interested_sponsors_per_package(client, api):
    organizer = api.organizer()
    other = api.organizer("other@college.edu")
    acme = api.sponsor()
    globex = api.sponsor("ceo@globex.com", company_name="Globex")
    event = api.event(organizer)
    first, second = api.packages(organizer, event["id"], amounts=(20000, 8000))
    api.interest(acme, first["id"])
    api.interest(globex, first["id"])
    api.interest(globex, second["id"])

    url = f"/api/events/{event['id']}/packages/interested-sponsors"
    r = client.get(url, headers=organizer.headers)
    assert r.status_code == 200
    views = r.json()["packages"]
    assert [v["package"]["package_number"] for v in views] == [1, 2]
    assert [s["company_name"] for s in views[0]["sponsors"]] == ["Acme Corp", "Globex"]
    assert [s["company_name"] for s in views[1]["sponsors"]] == ["Globex"]

    assert client.get(url, headers=other.headers).status_code == 403
