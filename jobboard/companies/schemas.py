"""
Company payload contracts.
"""

from __future__ import annotations

from jobboard.core.validation import FieldRule, PayloadSchema

COMPANY_NEW = PayloadSchema(
    "CompanyNew",
    {
        "handle": FieldRule("string", required=True, min_length=1, max_length=25),
        "name": FieldRule("string", required=True, min_length=1),
        "description": FieldRule("string", required=True),
        "numEmployees": FieldRule("integer", nullable=True, minimum=0),
        "logoUrl": FieldRule("string", nullable=True),
    },
)

# The handle is the company's identifier and cannot change.
COMPANY_UPDATE = PayloadSchema(
    "CompanyUpdate",
    {
        "name": FieldRule("string", min_length=1),
        "description": FieldRule("string"),
        "numEmployees": FieldRule("integer", nullable=True, minimum=0),
        "logoUrl": FieldRule("string", nullable=True),
    },
)
