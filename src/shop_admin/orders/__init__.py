"""
shop_admin.orders

Order domain package.

Responsibilities:
- Typed projection of backend order records and both status axes.
- The Order Workflow Controller issuing status transitions and payment links.
"""
