"""Global test configuration and fixtures."""
import json
from dataclasses import dataclass
from typing import List, Optional

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from requestbuilder.utils.api.api_client import APIResponse
from requestbuilder.utils.api.request_builder import HttpRequest


@dataclass
class SampleContent:
    id: int
    name: str

class QueryParameterValueReturningNull:
    """Object whose __str__ does not produce a string"""
    def __str__(self):
        return None

def make_response(
    status: int,
    body=b"",
    content_type: Optional[str] = None,
    url: str = "http://example.test/api",
    request: Optional[HttpRequest] = None
) -> APIResponse:
    """Build an APIResponse; dicts and lists are encoded as JSON"""
    headers = CIMultiDict()
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
        headers["Content-Type"] = content_type or "application/json"
    elif isinstance(body, str):
        body = body.encode("utf-8")
        if content_type:
            headers["Content-Type"] = content_type
    elif content_type:
        headers["Content-Type"] = content_type
    return APIResponse(
        status=status,
        body=body,
        headers=CIMultiDictProxy(headers),
        url=url,
        request=request
    )

class FakeTransport:
    """Transport returning canned responses and recording what it was sent"""

    def __init__(self, *responses: APIResponse):
        self.responses = list(responses)
        self.sent: List[HttpRequest] = []

    async def send(self, request: HttpRequest) -> APIResponse:
        self.sent.append(request)
        response = self.responses.pop(0)
        response.request = request
        return response

@pytest.fixture
def sample_content():
    return SampleContent(42, "SampleName")

@pytest.fixture
def problem_body():
    return {
        "type": "https://example.test/problems/out-of-stock",
        "title": "MyTitle",
        "detail": "MyDetails",
        "status": 500,
        "traceId": "00-abc-01",
        "retryable": False
    }

@pytest.fixture
def response_factory():
    return make_response

@pytest.fixture
def transport_factory():
    return FakeTransport

@pytest.fixture
def null_string_value():
    return QueryParameterValueReturningNull()
