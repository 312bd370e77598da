"""
shop_admin.backend.routers

Dev backend routers (health, auth, orders).
"""
