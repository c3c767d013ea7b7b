"""
sweetshop.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Enforce domain invariants (unique identities/names, non-negative stock).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with real sessions on a temp database.
