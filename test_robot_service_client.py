"""Tests for the backend HTTP client and its error classification"""
import json
import pytest
import requests

from errors import (
    CONFIGURATION_MESSAGE,
    ConfigurationError,
    ResponseFormatError,
    TransportError,
    UpstreamEmptyError,
)
from robot_schema import get_design_example
from robot_service_client import RobotServiceClient


def make_response(status_code=200, body="", content_type="application/json"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append((url, json, timeout))
        if self.error:
            raise self.error
        return self.response


def make_client(response=None, error=None):
    session = FakeSession(response, error)
    return RobotServiceClient(base_url="http://backend:3000/", timeout=5, session=session), session


def test_design_success_posts_prompt():
    client, session = make_client(make_response(body=json.dumps(get_design_example())))

    design = client.generate_robot_design("hexapod lunar rover")

    assert design.name == "LunarHex"
    assert session.requests == [
        ("http://backend:3000/api/generate-design", {"prompt": "hexapod lunar rover"}, 5)
    ]


def test_design_error_field_is_surfaced():
    body = json.dumps({"error": "Gemini returned an empty response."})
    client, _ = make_client(make_response(500, body))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_design("rover")

    assert exc_info.value.user_message == "Gemini returned an empty response."
    assert exc_info.value.status_code == 500


def test_missing_api_key_is_configuration_error():
    client, _ = make_client(make_response(500, json.dumps({"error": CONFIGURATION_MESSAGE})))

    with pytest.raises(ConfigurationError) as exc_info:
        client.generate_robot_design("rover")

    assert exc_info.value.user_message == CONFIGURATION_MESSAGE


def test_non_json_error_uses_truncated_body():
    html = "<html>" + "x" * 300 + "</html>"
    client, _ = make_client(make_response(502, html, content_type="text/html"))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_design("rover")

    assert str(exc_info.value) == f"Server Error (502): {html[:100]}"
    assert exc_info.value.body == html[:100]


def test_json_error_without_message_uses_default():
    client, _ = make_client(make_response(500, json.dumps({"detail": "x"})))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_design("rover")

    assert str(exc_info.value) == "Failed to generate design"


def test_non_json_success_is_transport_error():
    client, _ = make_client(make_response(200, "<!doctype html>", content_type="text/html"))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_design("rover")

    assert "Expected JSON response" in str(exc_info.value)


def test_network_failure_is_transport_error():
    client, _ = make_client(error=requests.ConnectionError("connection refused"))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_design("rover")

    assert exc_info.value.status_code is None
    assert "connection refused" in str(exc_info.value)


def test_timeout_is_transport_error():
    client, _ = make_client(error=requests.Timeout("read timed out"))

    with pytest.raises(TransportError):
        client.generate_robot_image("rover")


def test_empty_design_body_is_upstream_empty():
    client, _ = make_client(make_response(200, ""))

    with pytest.raises(UpstreamEmptyError):
        client.generate_robot_design("rover")


def test_undecodable_design_body_is_format_error():
    client, _ = make_client(make_response(200, '"just a string"'))

    with pytest.raises(ResponseFormatError):
        client.generate_robot_design("rover")


def test_image_success_returns_data_uri():
    uri = "data:image/png;base64,iVBORw0KGgo="
    client, session = make_client(make_response(body=json.dumps({"imageUrl": uri})))

    assert client.generate_robot_image("rover") == uri
    assert session.requests[0][:2] == ("http://backend:3000/api/generate-image", {"description": "rover"})


def test_image_null_returns_none():
    client, _ = make_client(make_response(body=json.dumps({"imageUrl": None})))

    assert client.generate_robot_image("rover") is None


def test_image_error_raises():
    client, _ = make_client(make_response(500, json.dumps({"error": "Quota exceeded"})))

    with pytest.raises(TransportError) as exc_info:
        client.generate_robot_image("rover")

    assert exc_info.value.user_message == "Quota exceeded"
