"""FollowUply backend: client, invoice, reminder and expense tracking for freelancers"""

__version__ = "1.0.0"
