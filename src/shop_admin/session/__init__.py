"""
shop_admin.session

Session Manager package.

Responsibilities:
- Own the one live console session (credential + principal).
- Persist it across process restarts.
- Decorate every outbound request with the current credential.
"""

# Package marker. `state` has no intra-package imports so `clients` can depend on it.
