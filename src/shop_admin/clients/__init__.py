"""
shop_admin.clients

Backend client package.

Responsibilities:
- Build the single decorated HTTP client used by every component.
- Map REST responses of the shop backend onto the error taxonomy.
"""

# The Session Manager and Order Workflow Controller depend on this boundary,
# never on httpx directly.
