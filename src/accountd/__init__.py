"""accountd: accounts and users behind JWT auth.

A small FastAPI service: account CRUD gated by bearer tokens and an
admin role, user seeding, and token issuance. Resources are served as
JSON:API documents.
"""

__version__ = "0.2.0"
