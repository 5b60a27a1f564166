"""
Chiya ordering platform

Table-side ordering for tea shops: customers order from a per-table link,
shop admins advance orders and manage the menu, and both views stay in
sync through a row-level change feed.
"""

__version__ = "1.0.0"
