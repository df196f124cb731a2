"""
Standardized API Responses

All API responses follow the format:
{
    "status": "success" | "error" | "partial",
    "message": "string message or empty",
    "data": {...} | [] | null
}
"""
from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from rest_framework import exceptions
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import exception_handler


def custom_exception_handler(exc, context):
    """
    Exception handler that formats all error responses consistently.

    Django exceptions raised by the service layer are translated first:
    - ObjectDoesNotExist -> 404
    - ValidationError -> 400, or the exception's own status_code (412 for a
      missing acting user)
    - any other exception carrying a status_code attribute (409 for a stale
      write) -> that status
    """
    exc = translate_exception(exc)
    response = exception_handler(exc, context)

    if response is not None:
        response.data = format_error_response(response.data, response.status_code)

    return response


def translate_exception(exc):
    if isinstance(exc, exceptions.APIException):
        return exc

    if isinstance(exc, ObjectDoesNotExist):
        return exceptions.NotFound(str(exc))

    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'message_dict') else exc.messages
        api_exc = exceptions.ValidationError(detail)
        api_exc.status_code = getattr(exc, 'status_code', http_status.HTTP_400_BAD_REQUEST)
        return api_exc

    status_code = getattr(exc, 'status_code', None)
    if isinstance(status_code, int):
        api_exc = exceptions.APIException(str(exc))
        api_exc.status_code = status_code
        return api_exc

    return exc


def format_error_response(errors, status_code):
    """
    Format error responses into standard format.

    Handles various error formats:
    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {str(field_errors)}")

        if error_messages:
            message = "; ".join(error_messages)

    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)

    else:
        message = str(errors)

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def format_nested_errors(errors_dict):
    """Format nested error dictionaries."""
    messages = []
    for key, value in errors_dict.items():
        if isinstance(value, list):
            messages.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, dict):
            messages.append(f"{key}: {format_nested_errors(value)}")
        else:
            messages.append(f"{key}: {str(value)}")
    return "; ".join(messages)


class StandardizedJSONRenderer(JSONRenderer):
    """
    JSON renderer that wraps every response not already in the standard format.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        # 204 No Content has no body
        if response is not None and response.status_code == 204:
            return b''
        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data, response.status_code)
            else:
                data = self.format_success_response(data)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        return isinstance(data, dict) and {'status', 'message', 'data'} <= set(data)

    def format_success_response(self, data):
        if isinstance(data, dict) and 'detail' in data:
            message = str(data['detail'])
            response_data = None
        elif data is None or (isinstance(data, dict) and not data):
            message = ""
            response_data = None
        else:
            message = ""
            response_data = data

        return {
            "status": "success",
            "message": message,
            "data": response_data
        }


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Usage:
        return success_response(
            data=serializer.data,
            message="Competency set created",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)


def error_response(message, data=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    """
    Usage:
        return error_response(
            message="Competency set not found",
            status_code=status.HTTP_404_NOT_FOUND
        )
    """
    return Response({
        "status": "error",
        "message": message,
        "data": data
    }, status=status_code)


def partial_response(message, data=None, status_code=http_status.HTTP_207_MULTI_STATUS):
    """Some items of a multi-item operation failed; `data` describes which."""
    return Response({
        "status": "partial",
        "message": message,
        "data": data
    }, status=status_code)
