"""Async AWS client adapter for DynamoDB and CloudWatch."""

import logging
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

import aioboto3  # type: ignore[import-untyped]
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import RemoteServiceError

logger = logging.getLogger(__name__)

METRICS_NAMESPACE = "AWS/DynamoDB"

# Request fields holding a map of attribute values (document -> wire)
_SERIALIZED_MAP_PARAMS = ("Key", "Item", "ExclusiveStartKey", "ExpressionAttributeValues")

# Response fields holding attribute values (wire -> document)
_DESERIALIZED_MAP_FIELDS = ("Item", "Attributes", "LastEvaluatedKey")

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_decimal(value: Any) -> Any:
    """Replace floats with Decimals, which is all TypeSerializer accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_decimal(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_decimal(v) for v in value]
    return value


def serialize_map(values: Mapping[str, Any]) -> dict[str, Any]:
    """Serialize a plain dict to DynamoDB attribute values."""
    return {k: _serializer.serialize(_to_decimal(v)) for k, v in values.items()}


def deserialize_map(values: Mapping[str, Any]) -> dict[str, Any]:
    """Deserialize DynamoDB attribute values to a plain dict."""
    return {k: _deserializer.deserialize(v) for k, v in values.items()}


def _serialize_params(table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
    request: dict[str, Any] = {**params, "TableName": table_name}
    for name in _SERIALIZED_MAP_PARAMS:
        if request.get(name) is not None:
            request[name] = serialize_map(request[name])
    return request


def _deserialize_response(response: Mapping[str, Any]) -> dict[str, Any]:
    result = {k: v for k, v in response.items() if k != "ResponseMetadata"}
    if "Items" in result:
        result["Items"] = [deserialize_map(item) for item in result["Items"]]
    for name in _DESERIALIZED_MAP_FIELDS:
        if result.get(name):
            result[name] = deserialize_map(result[name])
    return result


class RemoteClient:
    """
    Async adapter over the DynamoDB and CloudWatch APIs.

    Item-level operations speak the document model: keys, items and cursors
    are plain Python values rather than DynamoDB attribute-value maps.
    botocore failures surface as :class:`RemoteServiceError`.

    Args:
        region: AWS region (default: use boto3 defaults)
        endpoint_url: DynamoDB endpoint (for LocalStack or DynamoDB Local)
        session: Optional aioboto3 session to reuse
    """

    def __init__(
        self,
        region: str | None = None,
        endpoint_url: str | None = None,
        session: Any = None,
    ) -> None:
        self.region = region
        self.endpoint_url = endpoint_url
        self._session: aioboto3.Session | None = session
        self._dynamodb: Any = None
        self._cloudwatch: Any = None

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.region:
            kwargs["region_name"] = self.region
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = aioboto3.Session()
        return self._session

    async def _get_dynamodb(self) -> Any:
        """Get or create the DynamoDB client."""
        if self._dynamodb is None:
            session = self._get_session()
            self._dynamodb = await session.client("dynamodb", **self._client_kwargs()).__aenter__()
        return self._dynamodb

    async def _get_cloudwatch(self) -> Any:
        """Get or create the CloudWatch client."""
        if self._cloudwatch is None:
            session = self._get_session()
            self._cloudwatch = await session.client(
                "cloudwatch", **self._client_kwargs()
            ).__aenter__()
        return self._cloudwatch

    async def close(self) -> None:
        """Close any open clients."""
        for attr in ("_dynamodb", "_cloudwatch"):
            client = getattr(self, attr)
            if client is not None:
                await client.__aexit__(None, None, None)
                setattr(self, attr, None)

    async def _call(self, client: Any, operation: str, method: str, **kwargs: Any) -> Any:
        logger.debug("Calling %s", operation)
        try:
            return await getattr(client, method)(**kwargs)
        except ClientError as e:
            raise RemoteServiceError.from_client_error(operation, e) from e
        except BotoCoreError as e:
            raise RemoteServiceError(operation, str(e)) from e

    # -------------------------------------------------------------------------
    # Table operations
    # -------------------------------------------------------------------------

    async def list_tables(self, exclusive_start_table_name: str | None = None) -> dict[str, Any]:
        """Fetch one page of table names."""
        client = await self._get_dynamodb()
        kwargs: dict[str, Any] = {}
        if exclusive_start_table_name:
            kwargs["ExclusiveStartTableName"] = exclusive_start_table_name
        response = await self._call(client, "ListTables", "list_tables", **kwargs)
        result: dict[str, Any] = {"TableNames": response.get("TableNames", [])}
        if response.get("LastEvaluatedTableName"):
            result["LastEvaluatedTableName"] = response["LastEvaluatedTableName"]
        return result

    async def describe_table(self, table_name: str) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "DescribeTable", "describe_table", TableName=table_name
        )
        return response["Table"]

    async def update_table(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "UpdateTable", "update_table", **{**params, "TableName": table_name}
        )
        return _deserialize_response(response)

    async def describe_time_to_live(self, table_name: str) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "DescribeTimeToLive", "describe_time_to_live", TableName=table_name
        )
        return _deserialize_response(response)

    async def describe_limits(self) -> dict[str, Any]:
        """Fetch the account's provisioned capacity limits."""
        client = await self._get_dynamodb()
        response = await self._call(client, "DescribeLimits", "describe_limits")
        return _deserialize_response(response)

    # -------------------------------------------------------------------------
    # Item operations
    # -------------------------------------------------------------------------

    async def scan(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Fetch one page of a scan."""
        client = await self._get_dynamodb()
        response = await self._call(
            client, "Scan", "scan", **_serialize_params(table_name, params)
        )
        return _deserialize_response(response)

    async def query(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Fetch one page of a query."""
        client = await self._get_dynamodb()
        response = await self._call(
            client, "Query", "query", **_serialize_params(table_name, params)
        )
        return _deserialize_response(response)

    async def get_item(self, table_name: str, key: Mapping[str, Any]) -> dict[str, Any] | None:
        """Fetch a single item by key, or None if it does not exist."""
        client = await self._get_dynamodb()
        response = await self._call(
            client, "GetItem", "get_item", **_serialize_params(table_name, {"Key": key})
        )
        return _deserialize_response(response).get("Item")

    async def put_item(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "PutItem", "put_item", **_serialize_params(table_name, params)
        )
        return _deserialize_response(response)

    async def update_item(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "UpdateItem", "update_item", **_serialize_params(table_name, params)
        )
        return _deserialize_response(response)

    async def delete_item(self, table_name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        client = await self._get_dynamodb()
        response = await self._call(
            client, "DeleteItem", "delete_item", **_serialize_params(table_name, params)
        )
        return _deserialize_response(response)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    async def get_metric_sum(
        self,
        metric_name: str,
        dimensions: list[dict[str, str]],
        period: int,
        start_time: datetime,
        end_time: datetime,
    ) -> float:
        """
        Sum a DynamoDB CloudWatch metric over a time window.

        Args:
            metric_name: Metric name (e.g., "ConsumedReadCapacityUnits")
            dimensions: CloudWatch dimensions (TableName, GlobalSecondaryIndexName)
            period: Sampling period in seconds
            start_time: Window start
            end_time: Window end

        Returns:
            Sum of all datapoints, 0.0 when there are none
        """
        client = await self._get_cloudwatch()
        response = await self._call(
            client,
            "GetMetricStatistics",
            "get_metric_statistics",
            Namespace=METRICS_NAMESPACE,
            MetricName=metric_name,
            Dimensions=dimensions,
            StartTime=start_time,
            EndTime=end_time,
            Period=period,
            Statistics=["Sum"],
        )
        return float(sum(point.get("Sum") or 0 for point in response.get("Datapoints", [])))
