"""Tests for health check endpoint."""

from http.server import BaseHTTPRequestHandler

import pytest

from api.health import handler
from tests.utils.assertions import assert_valid_response
from tests.utils.helpers import invoke_handler


@pytest.mark.unit
def test_health_handler_class():
    """Test that handler is a BaseHTTPRequestHandler subclass."""
    assert issubclass(handler, BaseHTTPRequestHandler)


@pytest.mark.unit
def test_health_get_request():
    response = invoke_handler(handler, "GET", "/api/health")

    assert_valid_response(response, 200)
    assert response["json"]["status"] == "ok"
    assert response["json"]["service"] == "homefind-backend"
    assert response["json"]["environment"] == "test"


@pytest.mark.unit
def test_health_post_request():
    response = invoke_handler(handler, "POST", "/api/health")

    assert_valid_response(response, 200)
    assert response["json"]["status"] == "ok"
