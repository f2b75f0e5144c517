# userhub/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports throughout the application.

Models exported:
- User: User account, credential hash and live refresh token
- Subscription: Subscriber -> channel relation used by channel profiles
"""
from .user import User
from .subscription import Subscription
