"""
Common response envelope helpers
"""
from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a success response

    Args:
        data: response payload
        message: optional message

    Returns:
        success response dict
    """
    response = {
        "success": True,
        "data": data,
        "error": None
    }

    if message:
        response["message"] = message

    return response


def error_response(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build an error response

    Args:
        code: error code
        message: error message
        details: extra details

    Returns:
        error response dict
    """
    return {
        "success": False,
        "data": None,
        "error": {
            "code": code,
            "message": message,
            "details": details
        }
    }
