# userhub/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- exceptions: Error taxonomy (ValidationError, ConflictError, AuthError, ...)
- exception_handlers: Uniform error envelope for every route
- security: Password hashing and access/refresh token service
"""
