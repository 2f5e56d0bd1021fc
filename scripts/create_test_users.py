"""
Create a demo organizer, sponsor and agent (sponsor is created already approved).
Use to log in and try the deal flow without going through the approval queue.

Run from project root:
  python scripts/create_test_users.py

Uses the configured storage backend (DATABASE_URL). Credentials are printed at the end.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.models.user import UserRole
from app.services.accounts import create_user
from app.store import init_storage

# Default credentials (change if you want)
PASSWORD = "Password123!"

DEMO_USERS = [
    {
        "email": "organizer@sponsorhub.io",
        "role": UserRole.organizer,
        "name": "Demo Organizer",
        "phone": "9876543210",
        "club_name": "Tech Club",
        "college_name": "Demo Institute of Technology",
        "description": "Student technology club running the annual hackathon.",
    },
    {
        "email": "sponsor@sponsorhub.io",
        "role": UserRole.sponsor,
        "name": "Demo Sponsor",
        "phone": "9876543211",
        "company_name": "Acme Corp",
        "industry": "Software",
        "address": "1 Demo Road, Bengaluru",
    },
    {
        "email": "agent@sponsorhub.io",
        "role": UserRole.agent,
        "name": "Demo Agent",
        "phone": "9876543212",
    },
]


def main():
    storage = init_storage(get_settings())
    if storage.degraded:
        print("Database unreachable; demo users would only live in memory. Check DATABASE_URL.")
        return
    store = storage.open()
    try:
        for fields in DEMO_USERS:
            if store.find_user_by_email(fields["email"]):
                print(f"{fields['role'].value.capitalize()} already exists: {fields['email']}")
                continue
            create_user(store, password=PASSWORD, **fields)
            print(f"Created {fields['role'].value}: {fields['email']}")
    finally:
        store.close()

    print()
    for fields in DEMO_USERS:
        print(f"  {fields['role'].value:<10} {fields['email']}  /  {PASSWORD}")


if __name__ == "__main__":
    main()
