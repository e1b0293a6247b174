"""Stable identifiers for the bootstrap clinics and their users.

The bootstrap areas upsert these rows, so the same ids exist after every run
and dependent test data can be reproduced across machines.

Role mapping (one user per role per clinic):
    clinic_admin, orthodontist, assistant, front_desk, billing
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Clinics (the tenant boundary)
# ---------------------------------------------------------------------------

CLINIC_NORTH_ID: str = "00000000-0000-4000-8000-000000000001"
CLINIC_SOUTH_ID: str = "00000000-0000-4000-8000-000000000002"
CLINIC_EAST_ID: str  = "00000000-0000-4000-8000-000000000003"

SEED_CLINICS: list[dict[str, str]] = [
    {"id": CLINIC_NORTH_ID, "name": "North Orthodontics",  "slug": "north-ortho"},
    {"id": CLINIC_SOUTH_ID, "name": "South Smiles Clinic", "slug": "south-smiles"},
    {"id": CLINIC_EAST_ID,  "name": "East Bay Braces",     "slug": "east-bay-braces"},
]

ALL_CLINIC_IDS: list[str] = [clinic["id"] for clinic in SEED_CLINICS]

# ---------------------------------------------------------------------------
# Users, in role order; ``users_per_clinic`` takes a prefix of this list
# ---------------------------------------------------------------------------

USER_ROLES: list[str] = ["clinic_admin", "orthodontist", "assistant", "front_desk", "billing"]


def _users_for(clinic_index: int, clinic_id: str, slug: str) -> list[dict[str, str]]:
    return [
        {
            "id": f"00000000-{clinic_index:04d}-4000-8000-{role_index:012d}",
            "clinic_id": clinic_id,
            "email": f"{role.replace('_', '.')}@{slug}.test",
            "name": f"{role.replace('_', ' ').title()} ({slug})",
            "role": role,
        }
        for role_index, role in enumerate(USER_ROLES, start=1)
    ]


SEED_USERS: dict[str, list[dict[str, str]]] = {
    clinic["id"]: _users_for(index, clinic["id"], clinic["slug"])
    for index, clinic in enumerate(SEED_CLINICS, start=1)
}

ALL_USER_IDS: list[str] = [user["id"] for users in SEED_USERS.values() for user in users]
