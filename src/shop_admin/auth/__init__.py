"""
shop_admin.auth

Authentication package.

Responsibilities:
- The authenticated identity type (`Principal`) shared by console and dev backend.
- JWT helpers and FastAPI bearer dependency for the dev backend.
"""
