from unittest.mock import AsyncMock, MagicMock, patch

import niquests
import pytest

from mediafetch.core.errors import TransportFailure
from mediafetch.core.http import HttpRequest, NiquestsTransport


@pytest.mark.asyncio
async def test_issue_returns_status_and_text():
    transport = NiquestsTransport()
    mock_response = MagicMock(status_code=503, text="busy")

    with patch.object(transport.session, "get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_response
        response = await transport.issue(
            HttpRequest(url="https://m0.test/movies/1", headers={"X-Test": "1"})
        )

    assert response.status_code == 503
    assert response.text == "busy"
    assert not response.ok
    headers = mock_get.call_args.kwargs["headers"]
    assert headers["X-Test"] == "1"
    assert headers["Accept"] == "application/json"
    await transport.aclose()


@pytest.mark.asyncio
async def test_issue_maps_connection_errors():
    transport = NiquestsTransport()

    with patch.object(transport.session, "get", new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = niquests.exceptions.ConnectionError("refused")
        with pytest.raises(TransportFailure) as exc_info:
            await transport.issue(HttpRequest(url="https://m0.test/movies/1"))

    assert isinstance(exc_info.value.original_exception, niquests.exceptions.ConnectionError)
    await transport.aclose()


@pytest.mark.asyncio
async def test_missing_body_reads_as_empty():
    transport = NiquestsTransport()

    with patch.object(transport.session, "get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MagicMock(status_code=204, text=None)
        response = await transport.issue(HttpRequest(url="https://m0.test/movies/1"))

    assert response.ok
    assert response.text == ""
    await transport.aclose()


def test_default_headers_are_read_only():
    request = HttpRequest(url="https://m0.test/movies/1")
    assert dict(request.headers) == {}
    with pytest.raises(TypeError):
        request.headers["X-Test"] = "1"
    assert dict(HttpRequest(url="https://m0.test/movies/2").headers) == {}
