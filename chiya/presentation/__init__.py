"""
Presentation layer

Per-session facades composing the independent services for the customer
menu page and the admin dashboard.
"""

from .admin_console import AdminConsole
from .customer_flow import CustomerOrderingFlow

__all__ = ["AdminConsole", "CustomerOrderingFlow"]
