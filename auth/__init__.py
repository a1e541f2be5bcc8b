"""
auth — User authentication module.

Provides:
  • Signed token issuing & verification (``TokenIssuer``)
  • Password hashing (bcrypt, ``PasswordHasher``)
  • Register / Login / Profile API routes
  • ``get_current_identity`` FastAPI dependency
"""
