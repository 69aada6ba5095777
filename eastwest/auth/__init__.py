"""
Staff authentication.

Responsibilities:
- Verify staff credentials against bcrypt hashes.
- Issue, refresh and clear signed session cookies.
- Expose FastAPI dependencies for staff-only routes.
"""
