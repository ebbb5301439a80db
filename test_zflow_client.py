"""
Tests for the downstream Zoho Flow client.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from api.services.zflow_client import DownstreamError, ZohoFlowClient

ZFLOW_URL = "https://flow.zoho.com/123/flow/webhook/incoming?zapikey=abc"


@patch("api.services.zflow_client.requests.post")
def test_forward_posts_json_once(mock_post):
    mock_post.return_value = MagicMock(status_code=200, text='{"status":"success"}')

    result = ZohoFlowClient(ZFLOW_URL).forward({"email": "a@b.com"})

    mock_post.assert_called_once_with(
        ZFLOW_URL,
        json={"email": "a@b.com"},
        headers={"Content-Type": "application/json"},
        timeout=None,
    )
    assert result.status_code == 200
    assert result.text == '{"status":"success"}'
    assert result.ok is True


@patch("api.services.zflow_client.requests.post")
def test_non_2xx_is_a_completed_forward(mock_post):
    mock_post.return_value = MagicMock(status_code=400, text="bad request")

    result = ZohoFlowClient(ZFLOW_URL, timeout=5.0).forward({})

    assert result.status_code == 400
    assert result.ok is False
    assert mock_post.call_args.kwargs["timeout"] == 5.0


@patch("api.services.zflow_client.requests.post")
def test_network_failure_raises_downstream_error(mock_post):
    mock_post.side_effect = requests.ConnectionError("Name or service not known")

    with pytest.raises(DownstreamError, match="Name or service not known"):
        ZohoFlowClient(ZFLOW_URL).forward({})

    assert mock_post.call_count == 1


def test_url_is_required():
    with pytest.raises(ValueError):
        ZohoFlowClient("")
