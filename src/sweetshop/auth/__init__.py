"""
sweetshop.auth

Authentication/authorization package.

Responsibilities:
- Bearer token issuing/verification (TokenService).
- Password hashing.
- The request auth gate and its FastAPI dependencies (Principal + admin check).
"""

# Package marker.
