"""Placeholder users inserted by POST /seed in development."""

SEED_USERS: list[dict[str, str]] = [
    {
        "id": "410544b2-4001-4271-9855-fec4b6a6442a",
        "name": "User",
        "email": "user@nextmail.com",
        "password": "123456",
    },
]
