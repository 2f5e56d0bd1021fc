from conftest import AGENT_EMAIL, PASSWORD, organizer_signup, sponsor_signup


def test_root_health_and_ping(client):
    assert client.get("/").json()["status"] == "ok"

    health = client.get("/api/health").json()
    assert health["status"] == "healthy"
    assert health["storage"] in ("memory", "sql")

    counts = client.get("/api/ping").json()["counts"]
    # Seeded platform agent
    assert counts["users"]["agent"] == 1


def test_organizer_signup_returns_token_and_profile(client):
    r = client.post("/api/auth/signup", json=organizer_signup("Org@College.edu"))
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["pending_approval"] is False
    assert body["user"]["email"] == "org@college.edu"
    assert body["user"]["club_name"] == "Robotics Club"

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert profile.status_code == 200
    assert profile.json()["user"]["role"] == "organizer"


def test_signup_validation_errors(client):
    missing = organizer_signup("org@college.edu")
    del missing["club_name"]
    r = client.post("/api/auth/signup", json=missing)
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert "club_name" in r.json()["message"]

    r = client.post("/api/auth/signup", json=organizer_signup("org@college.edu", phone="12345"))
    assert r.status_code == 400

    r = client.post("/api/auth/signup", json=organizer_signup("not-an-email"))
    assert r.status_code == 400

    r = client.post("/api/auth/signup", json=organizer_signup("org@college.edu", password="abc"))
    assert r.status_code == 400


def test_duplicate_email_conflicts_across_roles(client, api):
    api.organizer("taken@college.edu")

    r = client.post("/api/auth/signup", json=organizer_signup("TAKEN@college.edu"))
    assert r.status_code == 409
    assert r.json()["code"] == "CONFLICT"

    r = client.post("/api/auth/signup", json=sponsor_signup("taken@college.edu"))
    assert r.status_code == 409


def test_sponsor_needs_agent_approval_before_login(client, api):
    r = client.post("/api/auth/signup", json=sponsor_signup("sam@acme.com"))
    assert r.status_code == 201
    assert r.json()["pending_approval"] is True
    assert r.json()["token"] is None

    r = client.post("/api/auth/login", json={"email": "sam@acme.com", "password": PASSWORD})
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"

    # A second application while the first is pending is refused
    r = client.post("/api/auth/signup", json=sponsor_signup("sam@acme.com"))
    assert r.status_code == 409

    agent = api.agent()
    pending = client.get("/api/admin/sponsors/pending", headers=agent.headers).json()["applications"]
    assert [a["email"] for a in pending] == ["sam@acme.com"]
    application_id = pending[0]["id"]

    r = client.post(f"/api/admin/sponsors/{application_id}/approve", headers=agent.headers)
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "sponsor"
    assert r.json()["user"]["company_name"] == "Acme Corp"

    r = client.post("/api/auth/login", json={"email": "sam@acme.com", "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "sponsor"

    r = client.post(f"/api/admin/sponsors/{application_id}/approve", headers=agent.headers)
    assert r.status_code == 409
    assert client.get("/api/admin/sponsors/pending", headers=agent.headers).json()["applications"] == []


def test_rejected_sponsor_cannot_login(client, api):
    client.post("/api/auth/signup", json=sponsor_signup("nope@acme.com"))
    agent = api.agent()
    application_id = client.get("/api/admin/sponsors/pending", headers=agent.headers).json()["applications"][0]["id"]

    r = client.post(f"/api/admin/sponsors/{application_id}/reject", headers=agent.headers)
    assert r.status_code == 200

    r = client.post("/api/auth/login", json={"email": "nope@acme.com", "password": PASSWORD})
    assert r.status_code == 403

    r = client.post("/api/admin/sponsors/999/approve", headers=agent.headers)
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_bad_credentials_are_unauthenticated_and_audited(client, api):
    api.organizer("org@college.edu")

    r = client.post("/api/auth/login", json={"email": "org@college.edu", "password": "wrong-pass"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "code": "UNAUTHENTICATED", "message": "Invalid email or password"}

    r = client.post("/api/auth/login", json={"email": "ghost@college.edu", "password": PASSWORD})
    assert r.status_code == 401

    agent = api.agent()
    logs = client.get("/api/admin/audit-logs", headers=agent.headers).json()["logs"]
    failed = [e for e in logs if e["category"] == "failed_attempt"]
    assert {e["actor_email"] for e in failed} == {"org@college.edu", "ghost@college.edu"}


def test_login_role_narrows_lookup(client, api):
    api.organizer("org@college.edu")
    r = client.post(
        "/api/auth/login", json={"email": "org@college.edu", "password": PASSWORD, "role": "organizer"}
    )
    assert r.status_code == 200
    r = client.post("/api/auth/login", json={"email": "org@college.edu", "password": PASSWORD, "role": "agent"})
    assert r.status_code == 401


def test_token_required(client):
    r = client.get("/api/auth/profile")
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHENTICATED"

    r = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_admin_endpoints_require_agent(client, api):
    organizer = api.organizer()
    r = client.get("/api/admin/sponsors/pending", headers=organizer.headers)
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"


def test_deactivated_user_loses_access(client, api):
    organizer = api.organizer()
    agent = api.agent()

    r = client.post(f"/api/admin/users/{organizer.id}/deactivate", headers=agent.headers)
    assert r.status_code == 200
    assert r.json()["user"]["is_active"] is False

    assert client.get("/api/auth/profile", headers=organizer.headers).status_code == 401
    r = client.post("/api/auth/login", json={"email": organizer.email, "password": PASSWORD})
    assert r.status_code == 401

    r = client.post(f"/api/admin/users/{agent.id}/deactivate", headers=agent.headers)
    assert r.status_code == 409


def test_user_lookup_and_sponsor_directory(client, api):
    sponsor = api.sponsor()
    organizer = api.organizer()

    r = client.get(f"/api/users/{sponsor.id}", headers=organizer.headers)
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "sponsor@acme.com"
    assert client.get("/api/users/9999", headers=organizer.headers).status_code == 404

    sponsors = client.get("/api/sponsors", headers=organizer.headers).json()["sponsors"]
    assert [s["company_name"] for s in sponsors] == ["Acme Corp"]


def test_default_agent_can_log_in(client):
    r = client.post("/api/auth/login", json={"email": AGENT_EMAIL.upper(), "password": "agent-secret"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "agent"
