"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
SQL fragment builders, payload validation, errors, logging). Keep
entity-specific columns and business rules in the feature package
(e.g. `jobs/`).
"""
