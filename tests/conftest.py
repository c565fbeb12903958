"""Pytest fixtures for dynshell tests."""

import asyncio
from collections.abc import Awaitable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from moto import mock_aws

from dynshell.bridge import BlockingBridge
from dynshell.broadcast import ContinuationSlot
from dynshell.cache import ProcessCache
from dynshell.client import RemoteClient


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    # Unset AWS_ENDPOINT_URL to ensure moto intercepts requests
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


def _patch_aiobotocore_response():
    """
    Patch aiobotocore to work with moto's sync responses.

    Moto returns botocore.awsrequest.AWSResponse which has sync content,
    but aiobotocore expects async content. This patch wraps the response
    handling to convert sync content to async.

    See: https://github.com/aio-libs/aiobotocore/discussions/1300
    """
    from aiobotocore import endpoint

    original_convert = endpoint.convert_to_response_dict

    async def patched_convert(http_response, operation_model):
        # If content is not awaitable (moto's sync response), wrap it
        if hasattr(http_response, "_content") and not isinstance(http_response._content, Awaitable):
            fut: asyncio.Future[bytes] = asyncio.Future()
            fut.set_result(http_response.content)
            http_response._content = fut
        return await original_convert(http_response, operation_model)

    return patch.object(endpoint, "convert_to_response_dict", patched_convert)


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock DynamoDB and CloudWatch for tests."""
    with mock_aws(), _patch_aiobotocore_response():
        yield


@pytest.fixture
def bridge():
    """A private blocking bridge, closed after the test."""
    bridge = BlockingBridge()
    yield bridge
    bridge.close()


@pytest.fixture
def cache() -> ProcessCache:
    return ProcessCache()


@pytest.fixture
def slot() -> ContinuationSlot:
    return ContinuationSlot()


@pytest.fixture
def client() -> MagicMock:
    """RemoteClient double whose operations are AsyncMocks."""
    client = MagicMock(spec=RemoteClient)
    for name in (
        "list_tables",
        "describe_table",
        "scan",
        "query",
        "get_item",
        "put_item",
        "update_item",
        "delete_item",
        "update_table",
        "describe_time_to_live",
        "describe_limits",
        "get_metric_sum",
        "close",
    ):
        setattr(client, name, AsyncMock(name=name))
    return client
