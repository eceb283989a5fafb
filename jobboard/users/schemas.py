"""
User payload contracts.
"""

from __future__ import annotations

from jobboard.core.validation import FieldRule, PayloadSchema

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"

_PROFILE = {
    "firstName": FieldRule("string", required=True, min_length=1, max_length=30),
    "lastName": FieldRule("string", required=True, min_length=1, max_length=30),
    "email": FieldRule("string", required=True, min_length=6, max_length=60, pattern=EMAIL_PATTERN),
}

USER_REGISTER = PayloadSchema(
    "UserRegister",
    {
        "username": FieldRule("string", required=True, min_length=1, max_length=25),
        "password": FieldRule("string", required=True, min_length=5, max_length=20),
        **_PROFILE,
    },
)

# Admin-created users may themselves be admins.
USER_NEW = PayloadSchema(
    "UserNew",
    {
        **USER_REGISTER.fields,
        "isAdmin": FieldRule("boolean"),
    },
)

USER_UPDATE = PayloadSchema(
    "UserUpdate",
    {
        "firstName": FieldRule("string", min_length=1, max_length=30),
        "lastName": FieldRule("string", min_length=1, max_length=30),
        "password": FieldRule("string", min_length=5, max_length=20),
        "email": FieldRule("string", min_length=6, max_length=60, pattern=EMAIL_PATTERN),
    },
)
