# requestbuilder/utils/api/__init__.py
# Created: 2026-10-19 09:12:40

"""
Fluent HTTP request building and response classification.
"""

from .request_builder import (
    RequestBuilder,
    HttpRequest,
    RequestMethod,
    DEFAULT_ACCEPT_HEADER
)

from .api_client import (
    APIClient,
    APIConfig,
    APIResponse,
    Transport,
    APIError,
    RequestError,
    ResponseError,
    ProblemDetailsError,
    GenericRequestError,
    DeserializationError
)

from .response_handler import (
    ResponseHandler,
    ProblemDetails,
    send_and_handle,
    send_as
)

__all__ = [
    'RequestBuilder',
    'HttpRequest',
    'RequestMethod',
    'DEFAULT_ACCEPT_HEADER',
    'APIClient',
    'APIConfig',
    'APIResponse',
    'Transport',
    'APIError',
    'RequestError',
    'ResponseError',
    'ProblemDetailsError',
    'GenericRequestError',
    'DeserializationError',
    'ResponseHandler',
    'ProblemDetails',
    'send_and_handle',
    'send_as'
]
