"""
sweetshop.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services only talk to repositories; swapping the backing store (e.g. SQLite to Postgres)
# should not touch service logic as long as the store supports UPDATE ... RETURNING.
