"""
Domain layer

Entities, value objects and repository interfaces for shops, menus,
carts and orders. Nothing here performs I/O.
"""
