# requestbuilder/utils/api/response_handler.py
# Created: 2026-10-19 10:05:51

from typing import Dict, Any, Optional, Callable, Type, TypeVar, Union
from dataclasses import dataclass, field
import json
import logging

from ...core.exceptions import ValidationError
from ...core.utils import convert_to_type
from .api_client import (
    APIResponse,
    DeserializationError,
    GenericRequestError,
    ProblemDetailsError,
    Transport
)
from .request_builder import HttpRequest

T = TypeVar('T')
logger = logging.getLogger(__name__)

PROBLEM_JSON_CONTENT_TYPE = "application/problem+json"
_PROBLEM_MEMBERS = ("type", "title", "status", "detail", "instance")

SuccessPredicate = Callable[[APIResponse], bool]
ProblemHandler = Callable[[APIResponse, "ProblemDetails"], None]
ErrorHandler = Callable[[APIResponse], None]

@dataclass
class ProblemDetails:
    """RFC 7807 problem report"""
    type: Optional[str] = None
    title: Optional[str] = None
    status: Optional[int] = None
    detail: Optional[str] = None
    instance: Optional[str] = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProblemDetails':
        status = data.get("status")
        if isinstance(status, bool) or not isinstance(status, (int, float, str)):
            status = None
        else:
            try:
                status = int(status)
            except (ValueError, OverflowError):
                status = None
        return cls(
            type=_optional_str(data.get("type")),
            title=_optional_str(data.get("title")),
            status=status,
            detail=_optional_str(data.get("detail")),
            instance=_optional_str(data.get("instance")),
            extensions={k: v for k, v in data.items() if k not in _PROBLEM_MEMBERS}
        )

def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)

def _request_url(response: APIResponse) -> Optional[str]:
    if response.url:
        return response.url
    if response.request is not None:
        return response.request.url
    return None

def is_success_status(response: APIResponse) -> bool:
    """Default success predicate: any 2xx status"""
    return response.is_success

def raise_problem_details(response: APIResponse, problem: ProblemDetails) -> None:
    raise ProblemDetailsError(
        problem,
        status=response.status,
        body=response.text,
        url=_request_url(response)
    )

def raise_generic_error(response: APIResponse) -> None:
    raise GenericRequestError(response.status, response.text, url=_request_url(response))

class ResponseHandler:
    """
    Classifies responses as success, problem report or plain failure.

    The three decisions are pluggable. ``is_success`` defaults to "status is
    2xx"; ``on_problem`` defaults to raising :class:`ProblemDetailsError`;
    ``on_error`` defaults to raising :class:`GenericRequestError`. Handlers
    passed to :meth:`ensure_success` override the instance defaults for that
    call only.
    """

    def __init__(
        self,
        is_success: Optional[SuccessPredicate] = None,
        on_problem: Optional[ProblemHandler] = None,
        on_error: Optional[ErrorHandler] = None
    ):
        self.is_success = is_success or is_success_status
        self.on_problem = on_problem or raise_problem_details
        self.on_error = on_error or raise_generic_error

    @staticmethod
    def parse_problem_details(response: APIResponse) -> Optional[ProblemDetails]:
        """
        Read the body as a problem report.

        Returns None instead of raising when the body is empty, not JSON, not
        an object, or an object with no standard problem member that was not
        served as ``application/problem+json``.
        """
        if not response.body:
            return None
        try:
            data = json.loads(response.body)
        except (ValueError, UnicodeDecodeError, RecursionError):
            return None
        if not isinstance(data, dict):
            return None

        declared = response.content_type.split(";", 1)[0].strip().lower() == PROBLEM_JSON_CONTENT_TYPE
        if not declared and not any(member in data for member in _PROBLEM_MEMBERS):
            return None
        return ProblemDetails.from_dict(data)

    def ensure_success(
        self,
        response: APIResponse,
        is_success: Optional[SuccessPredicate] = None,
        on_problem: Optional[ProblemHandler] = None,
        on_error: Optional[ErrorHandler] = None
    ) -> APIResponse:
        """
        Return ``response`` if it is successful, otherwise hand it to a handler.

        Args:
            response: response to classify
            is_success: success predicate for this call
            on_problem: called with the response and parsed ProblemDetails
            on_error: called with the response when no problem report parsed

        Returns:
            The response, unchanged, when successful or when a custom handler
            returned without raising

        Raises:
            ProblemDetailsError: default handling of a problem report
            GenericRequestError: default handling of any other failure
        """
        if (is_success or self.is_success)(response):
            return response

        problem = self.parse_problem_details(response)
        if problem is not None:
            logger.warning(
                f"Problem details from {_request_url(response)}: {problem.title} ({response.status})"
            )
            (on_problem or self.on_problem)(response, problem)
        else:
            logger.warning(f"Request to {_request_url(response)} failed with status {response.status}")
            (on_error or self.on_error)(response)
        return response

    @staticmethod
    def content_as(response: APIResponse, expected_type: Union[Type[T], Any]) -> T:
        """
        Deserialize the JSON body into ``expected_type``.

        Raises:
            DeserializationError: if the body is not JSON, is ``null``, or does
                not fit the type
        """
        try:
            data = json.loads(response.body)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            raise DeserializationError(
                f"Failed to deserialize response body: {str(e)}",
                status=response.status,
                body=response.text
            ) from e
        if data is None:
            raise DeserializationError(
                "Failed to deserialize response body: body is null",
                status=response.status,
                body=response.text
            )
        try:
            return convert_to_type(data, expected_type)
        except ValidationError as e:
            raise DeserializationError(
                f"Failed to deserialize response body as {getattr(expected_type, '__name__', expected_type)}: {e.message}",
                status=response.status,
                body=response.text
            ) from e

async def send_and_handle(
    transport: Transport,
    request: HttpRequest,
    handler: Optional[ResponseHandler] = None,
    **handler_options: Any
) -> APIResponse:
    """Send ``request`` and classify the response with ``ensure_success``"""
    response = await transport.send(request)
    return (handler or ResponseHandler()).ensure_success(response, **handler_options)

async def send_as(
    transport: Transport,
    request: HttpRequest,
    expected_type: Union[Type[T], Any],
    handler: Optional[ResponseHandler] = None,
    **handler_options: Any
) -> T:
    """Send ``request``, require success and deserialize the body"""
    response = await send_and_handle(transport, request, handler, **handler_options)
    return ResponseHandler.content_as(response, expected_type)
