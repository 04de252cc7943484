"""Elastigroup target Kubernetes operator using kopf."""

import kopf
import logging
import os
from typing import Dict, Any, Optional
from datetime import datetime

from kubernetes import config as k8s_config

from .config import setup_logging, Config
from .cluster import KubernetesNodePool
from .controller import ScalingAction, TargetController
from .errors import ElastiscalerError

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

GROUP = "autoscaling.elastiscaler.io"
VERSION = "v1alpha1"
PLURAL = "elastigrouptargets"

# Set once on startup
controller: Optional[TargetController] = None


def controller_config_from_env() -> Dict[str, str]:
    """Read operator-wide controller settings from ELASTISCALER_* variables."""
    return {
        Config.KEY_PROVIDER: os.getenv("ELASTISCALER_PROVIDER", ""),
        Config.KEY_GROUP_ID: os.getenv("ELASTISCALER_GROUP_ID", ""),
        Config.KEY_ACCOUNT_ID: os.getenv("ELASTISCALER_ACCOUNT_ID", ""),
        Config.KEY_TOKEN: os.getenv("ELASTISCALER_TOKEN", ""),
        Config.KEY_NODE_SELECTOR: os.getenv("ELASTISCALER_NODE_SELECTOR", ""),
        Config.KEY_NODE_ID_LABEL: os.getenv("ELASTISCALER_NODE_ID_LABEL", ""),
    }


def target_config_from_spec(spec: Dict[str, Any]) -> Dict[str, str]:
    """
    Translate an ElastigroupTarget spec into a per-target config mapping.

    Args:
        spec: The resource spec

    Returns:
        Config mapping for TargetController calls
    """
    return {
        Config.KEY_PROVIDER: spec.get("provider", ""),
        Config.KEY_GROUP_ID: spec.get("groupId", ""),
        Config.KEY_NODE_SELECTOR: spec.get("nodeSelector", ""),
        Config.KEY_NODE_ID_LABEL: spec.get("nodeIdLabel", ""),
    }


def condition(status: bool, reason: str, message: str) -> Dict[str, str]:
    return {
        "type": "Ready",
        "status": "True" if status else "False",
        "reason": reason,
        "message": message,
        "lastTransitionTime": datetime.utcnow().isoformat() + "Z",
    }


def load_kubernetes_config():
    """Load in-cluster config, falling back to kubeconfig."""
    try:
        k8s_config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except k8s_config.ConfigException:
        try:
            k8s_config.load_kube_config()
            logger.info("Loaded kubeconfig")
        except k8s_config.ConfigException:
            logger.error("Failed to load Kubernetes configuration")
            raise


@kopf.on.startup()
async def on_startup(**kwargs):
    """Build the shared controller."""
    global controller

    load_kubernetes_config()
    controller = TargetController.from_config(
        controller_config_from_env(), pool=KubernetesNodePool()
    )
    logger.info("Elastigroup target operator ready")


@kopf.on.cleanup()
async def on_cleanup(**kwargs):
    """Release the controller's API client."""
    if controller is not None:
        await controller.close()


@kopf.on.create(GROUP, VERSION, PLURAL)
@kopf.on.update(GROUP, VERSION, PLURAL, field="spec.desiredCount")
async def on_desired_count(spec, name, namespace, patch, **kwargs):
    """Apply spec.desiredCount to the Elastigroup."""
    if "desiredCount" not in spec:
        logger.info(f"ElastigroupTarget {namespace}/{name} has no desiredCount")
        return

    action = ScalingAction.from_count(int(spec["desiredCount"]))
    if spec.get("dryRun"):
        action = ScalingAction(desired_count=action.desired_count, dry_run=True)
    logger.info(
        f"Scaling ElastigroupTarget {namespace}/{name} to {action.desired_count} "
        f"(dry_run={action.dry_run})"
    )

    try:
        await controller.scale(action, target_config_from_spec(spec))
    except ElastiscalerError as e:
        logger.error(f"Scaling failed for {namespace}/{name}: {e}")
        patch.status["conditions"] = [condition(False, "ScalingFailed", str(e))]
        return

    patch.status["lastScaleTime"] = datetime.utcnow().isoformat() + "Z"
    patch.status["conditions"] = [
        condition(True, "ScalingSucceeded", f"Target capacity set to {action.desired_count}")
    ]


@kopf.timer(GROUP, VERSION, PLURAL, interval=30.0)
async def report_status(spec, name, namespace, patch, **kwargs):
    """Periodically publish group readiness to the resource status."""
    try:
        status = await controller.status(target_config_from_spec(spec))
    except ElastiscalerError as e:
        logger.error(f"Status check failed for {namespace}/{name}: {e}")
        patch.status["conditions"] = [condition(False, "StatusCheckFailed", str(e))]
        return

    patch.status["ready"] = status.ready
    patch.status["count"] = status.count
    patch.status["lastStatusCheckTime"] = datetime.utcnow().isoformat() + "Z"
    if status.ready:
        patch.status["conditions"] = [condition(True, "GroupReady", "All instances running")]
    else:
        patch.status["conditions"] = [
            condition(False, "GroupNotReady", "Cluster pool or instances not ready")
        ]


def main():
    """Run the operator."""
    logger.info("Starting Elastigroup target operator")
    kopf.run(clusterwide=True)


if __name__ == "__main__":
    main()
