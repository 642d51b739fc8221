# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Client-facing error taxonomy
- limits: Request body ceiling middleware
- security: Password hashing, session tokens and the auth gate
"""
