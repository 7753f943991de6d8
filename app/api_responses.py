"""
API Response Utilities - Standardized success envelope

Error envelopes are rendered by the handlers in exceptions.py.
"""

from flask import jsonify


# API Response Codes
class ErrorCode:
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"


def success_response(data=None, message=None, status_code=200):
    """
    Standard success response format for API endpoints
    """
    response = {"code": ErrorCode.SUCCESS, "success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return jsonify(response), status_code
