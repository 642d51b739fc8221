# app/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Chat account and credentials
- Message: Direct message between two users
"""
from .user import User
from .message import Message, pair_key
