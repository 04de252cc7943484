"""Unit tests for provider adapters."""

import aiohttp
import pytest
from unittest.mock import AsyncMock
from elastiscaler.client import SpotinstClient
from elastiscaler.errors import (
    ProviderReadError,
    ProviderUpdateError,
    SpotinstAPIError,
    TypeMismatchError,
    UnknownProviderError,
)
from elastiscaler.providers import (
    AWSAdapter,
    AzureAdapter,
    CloudProvider,
    GCPAdapter,
    GroupCapacity,
    NodeStatus,
    get_adapter,
)


def group_doc(target, minimum, maximum, group_id="sig-1"):
    return {
        "id": group_id,
        "name": "workers",
        "capacity": {"target": target, "minimum": minimum, "maximum": maximum},
    }


class TestGetAdapter:
    """Tests for adapter selection."""

    @pytest.mark.parametrize(
        "tag,adapter_cls",
        [("aws", AWSAdapter), ("azure", AzureAdapter), ("gcp", GCPAdapter)],
    )
    def test_known_providers(self, tag, adapter_cls):
        """Test each supported tag maps to its adapter."""
        adapter = get_adapter(tag, AsyncMock(spec=SpotinstClient))
        assert isinstance(adapter, adapter_cls)
        assert adapter.name == tag

    @pytest.mark.parametrize("tag", ["unknown-cloud", "AWS", "Azure", "", None])
    def test_unknown_provider(self, tag):
        """Test anything but an exact supported tag is rejected."""
        with pytest.raises(UnknownProviderError) as exc_info:
            get_adapter(tag, AsyncMock(spec=SpotinstClient))
        assert exc_info.value.provider == tag


class TestRead:
    """Tests for reading group capacity."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "adapter_cls,path",
        [
            (AWSAdapter, "/aws/ec2/group/sig-1"),
            (AzureAdapter, "/compute/azure/group/sig-1"),
            (GCPAdapter, "/gcp/gce/group/sig-1"),
        ],
    )
    async def test_read_capacity(self, adapter_cls, path):
        """Test capacity is normalized and a tagged handle is returned."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [group_doc(5, 1, 10)]
        adapter = adapter_cls(client)

        capacity, handle = await adapter.read("sig-1")

        assert capacity == GroupCapacity(target=5, minimum=1, maximum=10)
        assert handle.provider is adapter.provider
        assert handle.group_id == "sig-1"
        assert handle.group["name"] == "workers"
        client.get.assert_awaited_once_with(path)

    @pytest.mark.asyncio
    async def test_read_api_error(self):
        """Test API errors are wrapped with provider and group."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.side_effect = SpotinstAPIError(401, "unauthorized")

        with pytest.raises(ProviderReadError) as exc_info:
            await AWSAdapter(client).read("sig-1")

        assert exc_info.value.provider == "aws"
        assert exc_info.value.group_id == "sig-1"
        assert isinstance(exc_info.value.__cause__, SpotinstAPIError)

    @pytest.mark.asyncio
    async def test_read_connection_error(self):
        """Test transport errors are wrapped and not retried."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(ProviderReadError):
            await GCPAdapter(client).read("sig-1")

        assert client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_read_empty_response(self):
        """Test a response without a group is a read error."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = []

        with pytest.raises(ProviderReadError):
            await AzureAdapter(client).read("sig-1")

    @pytest.mark.asyncio
    async def test_read_missing_capacity(self):
        """Test a malformed group document is a read error."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [{"id": "sig-1"}]

        with pytest.raises(ProviderReadError):
            await AWSAdapter(client).read("sig-1")


class TestStatus:
    """Tests for per-instance status normalization."""

    @pytest.mark.asyncio
    async def test_aws_status(self):
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [{"instanceId": "i-1", "status": "running"}]

        nodes = await AWSAdapter(client).status("sig-1")

        assert nodes == [NodeStatus("i-1", "running")]

    @pytest.mark.asyncio
    async def test_azure_status(self):
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [
            {"vmName": "vm-1", "state": "Running"},
            {"vmName": "vm-2", "state": "Pending"},
        ]

        nodes = await AzureAdapter(client).status("sig-1")

        assert nodes == [NodeStatus("vm-1", "Running"), NodeStatus("vm-2", "Pending")]
        client.get.assert_awaited_once_with("/compute/azure/group/sig-1/status")

    @pytest.mark.asyncio
    async def test_gcp_status(self):
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [{"instanceName": "gce-1", "statusName": "RUNNING"}]

        nodes = await GCPAdapter(client).status("sig-1")

        assert nodes[0].identifier == "gce-1"
        assert nodes[0].is_running is True

    @pytest.mark.asyncio
    async def test_missing_state_is_not_running(self):
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [{"instanceId": "i-1"}]

        nodes = await AWSAdapter(client).status("sig-1")

        assert nodes[0].raw_state == ""
        assert nodes[0].is_running is False


class TestUpdate:
    """Tests for setting target capacity."""

    @pytest.mark.asyncio
    async def test_update_sends_target(self):
        """Test update PUTs the new target capacity."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [group_doc(5, 1, 10)]
        adapter = AWSAdapter(client)

        _, handle = await adapter.read("sig-1")
        await adapter.update(handle, 7)

        client.put.assert_awaited_once_with(
            "/aws/ec2/group/sig-1", {"group": {"capacity": {"target": 7}}}
        )

    @pytest.mark.asyncio
    async def test_handle_from_aws_into_azure(self):
        """Test a handle read from one cloud cannot update another."""
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [group_doc(5, 1, 10)]

        _, handle = await AWSAdapter(client).read("sig-1")

        with pytest.raises(TypeMismatchError) as exc_info:
            await AzureAdapter(client).update(handle, 7)

        assert exc_info.value.expected == "azure"
        assert exc_info.value.received == "aws"
        client.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_api_error(self):
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [group_doc(5, 1, 10)]
        client.put.side_effect = SpotinstAPIError(400, "GROUP_UPDATE_FAILED")
        adapter = GCPAdapter(client)

        _, handle = await adapter.read("sig-1")
        with pytest.raises(ProviderUpdateError) as exc_info:
            await adapter.update(handle, 7)

        assert exc_info.value.provider == "gcp"
        assert client.put.await_count == 1

    @pytest.mark.asyncio
    async def test_update_with_current_target_is_safe(self):
        """Test writing back the capacity just read succeeds unchanged."""
        group = group_doc(5, 1, 10)
        client = AsyncMock(spec=SpotinstClient)
        client.get.return_value = [group]
        adapter = AzureAdapter(client)

        capacity, handle = await adapter.read("sig-1")
        await adapter.update(handle, capacity.target)
        capacity_after, _ = await adapter.read("sig-1")

        assert capacity_after.target == capacity.target
        assert handle.provider is CloudProvider.AZURE
