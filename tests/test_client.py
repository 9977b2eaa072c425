"""Tests for the Cooksync HTTP client."""

from unittest.mock import MagicMock

import pytest
import requests

from cooksync.core.client import CooksyncClient, ServiceError, TransportError

from .conftest import make_response


def make_client(response: requests.Response | None = None) -> CooksyncClient:
    session = MagicMock()
    session.request.return_value = response if response is not None else make_response()
    return CooksyncClient("https://cooksync.test/", timeout=5, session=session)


class TestUrls:
    """Tests for URL building."""

    def test_base_url_trailing_slash_removed(self) -> None:
        assert make_client().base_url == "https://cooksync.test"

    def test_authorize_url(self) -> None:
        url = make_client().authorize_url("ab12cd")

        assert url == "https://cooksync.test/export?uuid=ab12cd&service=obsidian"

    def test_customize_url(self) -> None:
        assert make_client().customize_url() == "https://cooksync.test/export/obsidian"


class TestFetchToken:
    """Tests for the token endpoint."""

    def test_returns_token(self) -> None:
        client = make_client(make_response(200, {"token": "tok"}))

        assert client.fetch_token("ab12cd") == "tok"

        kwargs = client.session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://cooksync.test/api/clients/token?uuid=ab12cd"
        assert kwargs["headers"] is None
        assert kwargs["timeout"] == 5

    def test_pending_returns_none(self) -> None:
        client = make_client(make_response(200, {"status": "pending"}))

        assert client.fetch_token("ab12cd") is None

    def test_status_400_is_not_an_error(self) -> None:
        client = make_client(make_response(400, {}))

        assert client.fetch_token("ab12cd") is None

    def test_status_above_400_raises(self) -> None:
        client = make_client(make_response(401, text="Unknown client"))

        with pytest.raises(ServiceError, match="Unknown client") as exc_info:
            client.fetch_token("ab12cd")

        assert exc_info.value.status_code == 401

    def test_transport_failure_raises(self) -> None:
        client = make_client()
        client.session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError):
            client.fetch_token("ab12cd")


class TestRequestExport:
    """Tests for the export endpoint."""

    def test_sends_known_ids_and_headers(self) -> None:
        client = make_client(make_response(200, [{"id": 1, "title": "Soup", "content": "x"}]))

        payload = client.request_export({5, 2}, {"Authorization": "Bearer tok", "Client-Id": "ab12cd"})

        assert payload == [{"id": 1, "title": "Soup", "content": "x"}]
        kwargs = client.session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://cooksync.test/api/recipes/export/obsidian"
        assert kwargs["json"] == {"exportTarget": "obsidian", "recipeIds": [2, 5]}
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["headers"]["Client-Id"] == "ab12cd"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_empty_body_returns_none(self) -> None:
        client = make_client(make_response(200))

        assert client.request_export(set(), {}) is None

    def test_json_null_returns_none(self) -> None:
        client = make_client(make_response(200, text="null"))

        assert client.request_export(set(), {}) is None

    def test_error_without_body_uses_fallback_message(self) -> None:
        client = make_client(make_response(500))

        with pytest.raises(ServiceError, match="Can't connect to server"):
            client.request_export(set(), {})

    def test_invalid_json_raises_service_error(self) -> None:
        client = make_client(make_response(200, text="<html>oops</html>"))

        with pytest.raises(ServiceError, match="Invalid JSON"):
            client.request_export(set(), {})

