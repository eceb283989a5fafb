"""
Job payload contracts.
"""

from __future__ import annotations

from jobboard.core.validation import FieldRule, PayloadSchema

JOB_NEW = PayloadSchema(
    "JobNew",
    {
        "title": FieldRule("string", required=True, min_length=1),
        "salary": FieldRule("integer", nullable=True, minimum=0),
        "equity": FieldRule("number", nullable=True, minimum=0, maximum=1),
        "companyHandle": FieldRule("string", required=True, min_length=1, max_length=25),
    },
)

# Title and owning company are fixed once the job exists.
JOB_UPDATE = PayloadSchema(
    "JobUpdate",
    {
        "salary": FieldRule("integer", nullable=True, minimum=0),
        "equity": FieldRule("number", nullable=True, minimum=0, maximum=1),
    },
)
