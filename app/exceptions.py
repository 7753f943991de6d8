"""
Catalog - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

from api_responses import ErrorCode

logger = structlog.get_logger('exceptions')


class CatalogException(Exception):
    """Base exception for the catalog service"""
    status_code = 400

    def __init__(self, message: str, code: str = "CATALOG_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'code': self.code,
            'success': False,
            'message': self.message
        }


class NotFoundException(CatalogException):
    """A referenced game, platform, developer, genre, interaction or user does not resolve"""
    status_code = 404

    def __init__(self, resource: str, identifier=None, field: str = "id"):
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} with {field} '{identifier}' not found"
        self.resource = resource
        self.identifier = identifier
        super().__init__(message, code=ErrorCode.NOT_FOUND)
        logger.info(f"Not found: {message}")


class DuplicateResourceException(CatalogException):
    """Unique natural key conflict, or a second interaction for the same user and game"""
    status_code = 409

    def __init__(self, message: str = None, resource: str = None, field: str = None, value=None):
        if message is None:
            message = f"A {resource} with {field} '{value}' already exists"
        super().__init__(message, code=ErrorCode.CONFLICT)
        logger.warning(f"Duplicate resource: {message}")


class BusinessRuleException(CatalogException):
    """Domain rule violations (score out of range, invalid association request)"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.BUSINESS_RULE_VIOLATION)
        logger.warning(f"Business rule violation: {message}")


class ValidationException(CatalogException):
    """Validation-related exceptions"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.VALIDATION_ERROR)
        logger.warning(f"Validation error: {message}")


class AuthenticationException(CatalogException):
    """Authentication-related exceptions"""
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code=ErrorCode.UNAUTHORIZED)
        logger.warning(f"Authentication error: {message}")


class AuthorizationException(CatalogException):
    """Authorization-related exceptions"""
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code=ErrorCode.FORBIDDEN)
        logger.warning(f"Authorization error: {message}")


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions"""
        return jsonify({
            'code': e.name.upper().replace(' ', '_'),
            'success': False,
            'message': e.description
        }), e.code

    @app.errorhandler(CatalogException)
    def handle_catalog_exception(e):
        """Handle catalog exceptions, each subclass carries its status"""
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'code': ErrorCode.INTERNAL_ERROR,
            'success': False,
            'message': 'An unexpected error occurred'
        }), 500
