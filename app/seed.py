"""Seed the platform agent so pending deals always have someone to claim them."""
import logging

from app.config import Settings
from app.models.user import UserRole
from app.services.accounts import create_user
from app.store.base import Store

log = logging.getLogger("uvicorn.error")


def seed_default_agent(store: Store, settings: Settings) -> None:
    if store.find_user_by_email(settings.default_agent_email):
        return
    create_user(
        store,
        email=settings.default_agent_email,
        role=UserRole.agent,
        name=settings.default_agent_name,
        phone=settings.default_agent_phone,
        password=settings.default_agent_password,
    )
    log.info("Seeded default agent %s", settings.default_agent_email)
