"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class and error factory functions
- security: SecurityManager for password hashing and JWTs
- dependencies: FastAPI dependencies for the back-office session

Usage:
------
    from storefront.core import exceptions
    raise exceptions.product_not_found(product_id)

    from storefront.core.dependencies import require_admin

==============================================================================
"""

from .exceptions import AppException, register_exception_handlers
from .security import SecurityManager, get_security_manager

__all__ = [
    "AppException",
    "register_exception_handlers",
    "SecurityManager",
    "get_security_manager",
]
