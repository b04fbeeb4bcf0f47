"""
Application Exception Handling

Single AppException class for all API errors with FastAPI integration.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Usage:
        raise AppException("Invalid credentials", "INVALID_CREDENTIALS", 401)
        raise exceptions.product_not_found(product_id)

    Error Codes:
        Authentication:
            - INVALID_CREDENTIALS (401)
            - TOKEN_EXPIRED (401)
            - TOKEN_INVALID (401)
            - ACCOUNT_DISABLED (403)

        Catalog:
            - CATEGORY_NOT_FOUND (404)
            - PRODUCT_NOT_FOUND (404)
            - VARIANT_NOT_FOUND (404)
            - CONFLICT (409)

        Import:
            - INVALID_IMPORT_FILE (400)
            - IMPORT_NOT_FOUND (404)

        Remote store:
            - STORE_ERROR (502)
            - REORDER_FAILED (502)

        General:
            - VALIDATION_ERROR (422)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException as the standard JSON error body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# AUTHENTICATION
# ============================================

def invalid_credentials() -> AppException:
    return AppException("Invalid email or password", "INVALID_CREDENTIALS", 401)


def token_expired() -> AppException:
    return AppException("Token has expired", "TOKEN_EXPIRED", 401)


def token_invalid() -> AppException:
    return AppException("Invalid or malformed token", "TOKEN_INVALID", 401)


def account_disabled() -> AppException:
    return AppException("Account has been disabled", "ACCOUNT_DISABLED", 403)


# ============================================
# CATALOG
# ============================================

def category_not_found(category: Optional[str] = None) -> AppException:
    """Category missing by id, or by name during an import."""
    details = {"category": category} if category else {}
    return AppException("Category not found", "CATEGORY_NOT_FOUND", 404, details)


def product_not_found(product_id: Optional[str] = None) -> AppException:
    details = {"product_id": product_id} if product_id else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def variant_not_found(variant_id: Optional[str] = None) -> AppException:
    details = {"variant_id": variant_id} if variant_id else {}
    return AppException("Variant not found", "VARIANT_NOT_FOUND", 404, details)


def conflict(message: str, details: Optional[Dict[str, Any]] = None) -> AppException:
    """Write rejected by a store constraint (duplicate name, row still referenced)."""
    return AppException(message, "CONFLICT", 409, details)


# ============================================
# IMPORT
# ============================================

def invalid_import_file(reason: str) -> AppException:
    return AppException(reason, "INVALID_IMPORT_FILE", 400)


def import_not_found(job_id: str) -> AppException:
    return AppException("Import job not found", "IMPORT_NOT_FOUND", 404, {"job_id": job_id})


# ============================================
# REMOTE STORE
# ============================================

def store_error(message: str = "Remote store request failed") -> AppException:
    return AppException(message, "STORE_ERROR", 502)


def reorder_failed(updated: list, failed: list, partially_applied: bool) -> AppException:
    """
    Create reorder failure exception.

    Writes that succeeded are not rolled back; the details say which
    variants now carry their new rank and which do not.
    """
    return AppException(
        f"Failed to update {len(failed)} variant rank(s)",
        "REORDER_FAILED",
        502,
        {
            "updated": updated,
            "failed": failed,
            "partially_applied": partially_applied,
        }
    )


# ============================================
# GENERAL
# ============================================

def validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> AppException:
    return AppException(message, "VALIDATION_ERROR", 422, details)

