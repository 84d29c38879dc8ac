"""
Standardized JSON response utilities for API endpoints.

Provides consistent response formats for success and error responses across all routes.
"""

from typing import Any, Dict, Optional, Union
from flask import jsonify, Response, current_app
from http import HTTPStatus


def success_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = HTTPStatus.OK
) -> tuple[Response, int]:
    """
    Generate a standardized success response.

    Args:
        data: Response payload (dict, list, or any JSON-serializable data)
        message: Success message to include in response
        status_code: HTTP status code (default: 200 OK)

    Returns:
        Tuple of (JSON response, status code)

    Example:
        >>> return success_response({"application": app_dict}, "Application updated")
        ({
            "success": true,
            "message": "Application updated",
            "data": {"application": {...}}
        }, 200)
    """
    response_body = {
        "success": True,
        "message": message,
    }

    if data is not None:
        response_body["data"] = data

    return jsonify(response_body), status_code


def error_response(
    code: str,
    message: str,
    details: Optional[Union[str, Dict[str, Any]]] = None,
    status_code: int = HTTPStatus.BAD_REQUEST
) -> tuple[Response, int]:
    """
    Generate a standardized error response.

    Args:
        code: Error code identifier (e.g., "UNAUTHORIZED", "NOT_FOUND")
        message: Human-readable error message
        details: Additional error details (string or dict with field-level errors)
        status_code: HTTP status code (default: 400 Bad Request)

    Returns:
        Tuple of (JSON response, status code)
    """
    error_body = {
        "code": code,
        "message": message,
    }

    if details is not None:
        error_body["details"] = details

    response_body = {
        "success": False,
        "error": error_body,
    }

    return jsonify(response_body), status_code


# Convenience functions for common HTTP responses

def ok(data: Any = None, message: str = "Success") -> tuple[Response, int]:
    return success_response(data, message, HTTPStatus.OK)


def created(data: Any = None, message: str = "Resource created") -> tuple[Response, int]:
    return success_response(data, message, HTTPStatus.CREATED)


def bad_request(message: str, details: Optional[Union[str, Dict[str, Any]]] = None) -> tuple[Response, int]:
    """
    400 Bad Request error response.

    Args:
        message: Error message
        details: Field-level validation messages or a string

    Returns:
        Tuple of (JSON response, 400)
    """
    return error_response("BAD_REQUEST", message, details, HTTPStatus.BAD_REQUEST)


def unauthorized(message: str = "Authentication required", details: Optional[str] = None) -> tuple[Response, int]:
    return error_response("UNAUTHORIZED", message, details, HTTPStatus.UNAUTHORIZED)


def forbidden(message: str = "Access denied", details: Optional[str] = None) -> tuple[Response, int]:
    return error_response("FORBIDDEN", message, details, HTTPStatus.FORBIDDEN)


def not_found(resource: str = "Resource", details: Optional[str] = None) -> tuple[Response, int]:
    """
    404 Not Found error response.

    Args:
        resource: Name of resource that was not found
        details: Additional error details

    Returns:
        Tuple of (JSON response, 404)
    """
    message = f"{resource} not found"
    return error_response("NOT_FOUND", message, details, HTTPStatus.NOT_FOUND)


def conflict(message: str, details: Optional[Union[str, Dict[str, Any]]] = None) -> tuple[Response, int]:
    return error_response("CONFLICT", message, details, HTTPStatus.CONFLICT)


def internal_error(message: str = "Internal server error", details: Optional[str] = None) -> tuple[Response, int]:
    """
    500 Internal Server Error response.

    The underlying error text is only returned outside production.

    Args:
        message: Error message
        details: Underlying error text

    Returns:
        Tuple of (JSON response, 500)
    """
    if current_app.config.get('ENVIRONMENT') == 'production':
        details = None
    return error_response("INTERNAL_ERROR", message, details, HTTPStatus.INTERNAL_SERVER_ERROR)


def rejection_response(rejection) -> tuple[Response, int]:
    """Render a Rejection value (see casthub.utils.errors) as an error response."""
    return rejection.to_response()
