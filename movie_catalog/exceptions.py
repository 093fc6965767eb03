from enum import Enum

from django.core.exceptions import ImproperlyConfigured

from rest_framework import status
from rest_framework.exceptions import APIException


class ErrorType(Enum):
    BAD_REQUEST = (status.HTTP_400_BAD_REQUEST, "Bad request")
    NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Resource not found")
    CONFLICT = (status.HTTP_409_CONFLICT, "Conflict")
    ALREADY_EXISTS = (status.HTTP_409_CONFLICT, "Resource already exists")
    SERVER_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @property
    def code(self):
        return self.value[0]

    @property
    def message(self):
        return self.value[1]


class CatalogError(APIException):
    error_type = ErrorType.SERVER_ERROR
    status_code = ErrorType.SERVER_ERROR.code
    default_detail = ErrorType.SERVER_ERROR.message
    default_code = "server_error"


class BadRequest(CatalogError):
    error_type = ErrorType.BAD_REQUEST
    status_code = ErrorType.BAD_REQUEST.code
    default_detail = ErrorType.BAD_REQUEST.message
    default_code = "bad_request"


class NotFound(CatalogError):
    error_type = ErrorType.NOT_FOUND
    status_code = ErrorType.NOT_FOUND.code
    default_detail = ErrorType.NOT_FOUND.message
    default_code = "not_found"


class Conflict(CatalogError):
    error_type = ErrorType.CONFLICT
    status_code = ErrorType.CONFLICT.code
    default_detail = ErrorType.CONFLICT.message
    default_code = "conflict"


class AlreadyExists(Conflict):
    error_type = ErrorType.ALREADY_EXISTS
    default_detail = ErrorType.ALREADY_EXISTS.message
    default_code = "already_exists"


class ServerError(CatalogError):
    pass


class TMDBError(ServerError):
    def __init__(self, detail=None, url=None, status_code=None):
        super().__init__(detail)
        self.url = url
        self.http_status = status_code


class TMDBRequestError(TMDBError):
    """The remote API could not be reached or answered with a non-2xx status."""


class TMDBResponseError(TMDBError):
    """The remote API answered, but the body could not be decoded."""


class SyncError(ServerError):
    def __init__(self, page, cause):
        self.page = page
        self.cause = cause
        nested = getattr(cause, "__cause__", None)
        detail = f"Failed importing movies on page {page}: {type(cause).__name__} - {cause}"
        if nested is not None:
            detail += f" | cause={type(nested).__name__}: {nested}"
        super().__init__(detail)


class MissingAPIKey(ImproperlyConfigured):
    pass
