"""
auth: User accounts and authentication.

Provides:
  • HS256 JWT creation & verification
  • Password hashing (bcrypt)
  • Sign up / sign in / profile / password API routes
  • ``get_current_user`` FastAPI dependency
"""
