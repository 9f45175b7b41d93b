"""
auth — User authentication module.

Provides:
  • Signed bearer token creation & verification
  • Password hashing (bcrypt)
  • Register / Login / Me / Logout API routes
  • ``get_current_auth`` FastAPI dependency
"""
