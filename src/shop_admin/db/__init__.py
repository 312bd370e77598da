"""
shop_admin.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the ORM model, engine and session factory for the durable session record.
"""
