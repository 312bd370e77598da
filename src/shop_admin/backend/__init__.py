"""
shop_admin.backend

Development backend.

Responsibilities:
- Emulate the shop backend's auth and order endpoints in-process (FastAPI).
- Record the customer notifications a real backend would send.
"""

# Not a production server: state is in memory and lost on restart.
