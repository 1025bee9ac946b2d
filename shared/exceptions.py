"""
Shared exceptions and custom exception handler.
Consolidates all domain exceptions for the application.
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler


# === Base Exceptions ===

class AppException(Exception):
    """Base exception for application."""

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class NotFoundError(AppException):
    """Entity not found."""

    def __init__(self, entity_name: str, entity_id: str, code: str = None):
        super().__init__(
            message=f"{entity_name} with id '{entity_id}' not found",
            code=code or "ENTITY_NOT_FOUND"
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class ValidationError(AppException):
    """Validation failed."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message=message, code="VALIDATION_ERROR")
        self.field = field


class ConflictError(AppException):
    """Entity clashes with existing state."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message=message, code=code or "CONFLICT")


class BusinessRuleError(AppException):
    """Business rule violated."""

    def __init__(self, message: str, rule: str = None):
        super().__init__(message=message, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


# === Exception Handler ===

def custom_exception_handler(exc, context):
    """Handle custom application exceptions."""
    response = exception_handler(exc, context)

    from rest_framework.exceptions import NotAuthenticated, AuthenticationFailed
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return Response(
            {
                'status': 401,
                'message': 'Authentication required.'
            },
            status=status.HTTP_401_UNAUTHORIZED
        )

    from rest_framework.exceptions import PermissionDenied
    if isinstance(exc, PermissionDenied):
        return Response(
            {
                'status': 403,
                'message': 'Permission denied.'
            },
            status=status.HTTP_403_FORBIDDEN
        )

    # Serializer errors keep the field map, first message on top
    from rest_framework.exceptions import ValidationError as DRFValidationError
    if isinstance(exc, DRFValidationError) and response is not None:
        data = response.data
        if isinstance(data, dict) and 'detail' not in data:
            first_error = next(iter(data.values()), [])
            if isinstance(first_error, list) and first_error:
                error_message = first_error[0]
            else:
                error_message = 'Invalid request.'
            return Response(
                {
                    'status': response.status_code,
                    'message': error_message,
                    'errors': data,
                },
                status=response.status_code
            )

    if response is not None and isinstance(response.data, dict) and 'detail' in response.data:
        return Response(
            {
                'status': response.status_code,
                'message': response.data['detail']
            },
            status=response.status_code
        )

    if isinstance(exc, NotFoundError):
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
                'entity': exc.entity_name,
                'entity_id': exc.entity_id,
            },
            status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, ValidationError):
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
                'field': exc.field,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, ConflictError):
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, BusinessRuleError):
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
                'rule': exc.rule,
            },
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(exc, AppException):
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    return response
