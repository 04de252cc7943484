"""Cluster node pool readiness, consulted before contacting the cloud provider."""

from abc import ABC, abstractmethod
from typing import Optional
import logging
from kubernetes import client
from kubernetes.client.rest import ApiException

from .config import Config, TargetConfig
from .errors import NodeLookupError, PoolReadinessError

logger = logging.getLogger(__name__)


class ClusterPool(ABC):
    """The orchestrator's view of the nodes backing an Elastigroup."""

    @abstractmethod
    def is_pool_ready(self, config: TargetConfig) -> bool:
        """
        Check whether the orchestrator-visible nodes are healthy.

        Args:
            config: Target configuration for this invocation

        Returns:
            True if the pool is ready for scaling

        Raises:
            PoolReadinessError: If the check could not be performed
        """
        pass

    @abstractmethod
    def node_identifier(self, node, label: Optional[str] = None) -> str:
        """
        Map a cluster node to its provider instance identifier.

        Args:
            node: Cluster node object
            label: Node label holding the identifier, if not the default

        Raises:
            NodeLookupError: If the node does not carry an identifier
        """
        pass


class KubernetesNodePool(ClusterPool):
    """
    Node pool backed by the Kubernetes API.

    Nodes are selected by the ``node_selector`` label selector. The pool is
    ready when every selected node reports Ready=True and none is cordoned.
    """

    def __init__(
        self,
        core_api: Optional[client.CoreV1Api] = None,
        node_id_label: str = Config.DEFAULT_NODE_ID_LABEL,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.core_api = core_api or client.CoreV1Api()
        self.node_id_label = node_id_label

    def _is_node_ready(self, node) -> bool:
        if node.spec is not None and node.spec.unschedulable:
            return False

        conditions = (node.status.conditions if node.status else None) or []
        for condition in conditions:
            if condition.type == "Ready":
                return condition.status == "True"
        return False

    def is_pool_ready(self, config: TargetConfig) -> bool:
        try:
            nodes = self.core_api.list_node(label_selector=config.node_selector or "")
        except ApiException as e:
            raise PoolReadinessError(f"failed to list cluster nodes: {e}") from e

        for node in nodes.items:
            if not self._is_node_ready(node):
                try:
                    node_id = self.node_identifier(node, config.node_id_label)
                except NodeLookupError:
                    node_id = node.metadata.name
                self.logger.info(f"Node {node_id} is not ready, pool is not ready")
                return False

        self.logger.debug(f"All {len(nodes.items)} nodes in pool are ready")
        return True

    def node_identifier(self, node, label: Optional[str] = None) -> str:
        label = label or self.node_id_label
        labels = (node.metadata.labels if node.metadata else None) or {}
        value = labels.get(label)
        if not value:
            raise NodeLookupError(f"label {label!r} not found")
        return value
