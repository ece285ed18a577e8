"""Tests for the Sheets/Drive REST client."""

from unittest.mock import AsyncMock

import httpx
import pytest

from sheets_gateway.auth.exceptions import CredentialError
from sheets_gateway.sheets.client import SheetsClient, encode_range, parse_api_error
from sheets_gateway.sheets.exceptions import SheetsAPIError


def _client(handler, headers=None, params=None) -> SheetsClient:
    authorizer = AsyncMock()
    authorizer.auth_type = "OAuth2"
    authorizer.authorize.return_value = (headers or {}, params or {})
    return SheetsClient(
        authorizer=authorizer,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sheets_base_url="https://sheets.test/v4/",
        drive_base_url="https://drive.test/v3",
        project_id="proj",
    )


def test_encode_range():
    """Test A1 range encoding."""
    assert encode_range("'My Sheet'!A1:B2") == "%27My%20Sheet%27%21A1%3AB2"


class TestParseApiError:
    def test_google_error_body(self):
        """Google error bodies keep message, status and details."""
        response = httpx.Response(
            404,
            json={"error": {"code": 404, "message": "Not there", "status": "NOT_FOUND", "details": [1]}},
        )

        exc = parse_api_error(response)

        assert exc.status_code == 404
        assert exc.message == "Not there"
        assert exc.code == "NOT_FOUND"
        assert exc.details == [1]

    def test_oauth_error_body(self):
        """OAuth token errors use error_description."""
        response = httpx.Response(
            400,
            json={"error": "invalid_grant", "error_description": "Token has been expired or revoked."},
        )

        exc = parse_api_error(response)

        assert exc.status == "invalid_grant"
        assert exc.message == "Token has been expired or revoked."

    def test_non_json_body_is_truncated(self):
        """Non-JSON error bodies are truncated."""
        response = httpx.Response(502, text="x" * 500)

        exc = parse_api_error(response)

        assert exc.code == "HTTP_502"
        assert len(exc.message) == 200


class TestSheetsClient:
    @pytest.mark.asyncio
    async def test_bearer_header_and_params(self):
        """Bearer headers are sent and None params dropped."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = _client(handler, headers={"Authorization": "Bearer tok"})
        data = await client.sheets("GET", "/abc", params={"includeGridData": "false", "unused": None})

        assert data == {"ok": True}
        request = seen[0]
        assert str(request.url) == "https://sheets.test/v4/spreadsheets/abc?includeGridData=false"
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_api_key_param(self):
        """API keys travel as a query parameter."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = _client(handler, params={"key": "k"})
        await client.drive("GET", "/files")

        assert seen[0].url.params["key"] == "k"
        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        """Test error status raises SheetsAPIError."""
        client = _client(lambda request: httpx.Response(403, json={"error": {"message": "no", "status": "PERMISSION_DENIED"}}))

        with pytest.raises(SheetsAPIError) as exc_info:
            await client.drive("GET", "/files")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_credential_error_propagates(self):
        """Credential failures are not swallowed by the client."""
        client = _client(lambda request: httpx.Response(200, json={}))
        client._authorizer.authorize.side_effect = CredentialError("OAuth2", "invalid_grant")

        with pytest.raises(CredentialError):
            await client.sheets("GET", "/abc")

    def test_auth_type(self):
        """Test client metadata."""
        client = _client(lambda request: httpx.Response(200))

        assert client.auth_type == "OAuth2"
        assert client.project_id == "proj"

    @pytest.mark.asyncio
    async def test_invalid_json_body_raises(self):
        """Success replies must carry a JSON object."""
        client = _client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(SheetsAPIError) as exc_info:
            await client.sheets("GET", "/abc")

        assert exc_info.value.message == "Invalid JSON response from API"
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_json_array_body_raises(self):
        """A JSON array is rejected like an undecodable body."""
        client = _client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(SheetsAPIError):
            await client.drive("GET", "/files")
