"""Spotinst Elastigroup target adapter for autoscaling orchestrators."""

from .controller import ScalingAction, TargetController, TargetStatus

__all__ = [
    "ScalingAction",
    "TargetController",
    "TargetStatus",
]
