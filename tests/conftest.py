from collections import namedtuple

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, STORAGE_MEMORY, STORAGE_SQL
from app.main import create_app

AGENT_EMAIL = "agent@sponsorhub.io"
AGENT_PASSWORD = "agent-secret"
PASSWORD = "secret123"

Account = namedtuple("Account", ["id", "email", "token", "headers"])


def _settings(backend: str) -> Settings:
    return Settings(
        _env_file=None,
        storage_backend=backend,
        database_url="sqlite://",
        storage_fallback_to_memory=False,
        mailgun_api_key="",
        mailgun_domain="",
        default_agent_email=AGENT_EMAIL,
        default_agent_password=AGENT_PASSWORD,
        default_agent_name="Agent Smith",
    )


@pytest.fixture(params=[STORAGE_MEMORY, STORAGE_SQL])
def client(request):
    """App on a fresh store: the in-memory backend and an in-memory SQLite database."""
    with TestClient(create_app(_settings(request.param))) as c:
        yield c


class Api:
    """Request helpers for building up accounts, events and deals."""

    def __init__(self, client: TestClient) -> None:
        self.client = client

    @staticmethod
    def auth(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    def _account(self, token: str) -> Account:
        headers = self.auth(token)
        r = self.client.get("/api/auth/profile", headers=headers)
        assert r.status_code == 200, r.text
        user = r.json()["user"]
        return Account(user["id"], user["email"], token, headers)

    def login(self, email: str, password: str = PASSWORD) -> Account:
        r = self.client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return self._account(r.json()["token"])

    def agent(self) -> Account:
        return self.login(AGENT_EMAIL, AGENT_PASSWORD)

    def organizer(self, email: str = "org@college.edu", **overrides) -> Account:
        body = organizer_signup(email, **overrides)
        r = self.client.post("/api/auth/signup", json=body)
        assert r.status_code == 201, r.text
        return self._account(r.json()["token"])

    def sponsor(self, email: str = "sponsor@acme.com", **overrides) -> Account:
        """Sign up, approve through the agent queue, log in."""
        r = self.client.post("/api/auth/signup", json=sponsor_signup(email, **overrides))
        assert r.status_code == 201, r.text
        agent = self.agent()
        pending = self.client.get("/api/admin/sponsors/pending", headers=agent.headers).json()["applications"]
        application_id = next(a["id"] for a in pending if a["email"] == email)
        r = self.client.post(f"/api/admin/sponsors/{application_id}/approve", headers=agent.headers)
        assert r.status_code == 200, r.text
        return self.login(email)

    def event(self, organizer: Account, **overrides) -> dict:
        r = self.client.post("/api/events", json=event_payload(**overrides), headers=organizer.headers)
        assert r.status_code == 201, r.text
        return r.json()["event"]

    def packages(self, organizer: Account, event_id: int, amounts=(10000,)) -> list[dict]:
        body = {"packages": [{"amount": a, "deliverables": f"Logo on banner, {a} tier"} for a in amounts]}
        r = self.client.post(f"/api/events/{event_id}/packages", json=body, headers=organizer.headers)
        assert r.status_code == 201, r.text
        return r.json()["packages"]

    def interest(self, sponsor: Account, package_id: int) -> dict:
        r = self.client.post(f"/api/packages/{package_id}/interest", headers=sponsor.headers)
        assert r.status_code == 201, r.text
        return r.json()["deal"]


@pytest.fixture
def api(client):
    return Api(client)


def organizer_signup(email: str, **overrides) -> dict:
    body = {
        "email": email,
        "password": PASSWORD,
        "name": "Olivia Organizer",
        "phone": "9876543210",
        "role": "organizer",
        "club_name": "Robotics Club",
        "college_name": "City College",
        "description": "Robotics and automation club",
    }
    body.update(overrides)
    return body


def sponsor_signup(email: str, **overrides) -> dict:
    body = {
        "email": email,
        "password": PASSWORD,
        "name": "Sam Sponsor",
        "phone": "9123456780",
        "role": "sponsor",
        "company_name": "Acme Corp",
        "industry": "Software",
        "address": "1 Main Street",
    }
    body.update(overrides)
    return body


def event_payload(**overrides) -> dict:
    body = {
        "title": "HackFest",
        "description": "24 hour student hackathon",
        "event_date": "2026-12-01",
        "expected_attendees": 300,
        "sponsorship_amount": 50000,
        "category": "technical",
        "venue": "Main Hall",
        "status": "published",
    }
    body.update(overrides)
    return body
