"""
Detection of a failed devnet workload.

A devnet is considered failed when its Deployment gives up rolling out, or
when the devnet container is stuck waiting on something that only a change
to the devnet spec can fix.
"""
from typing import Any, Dict, List, Optional

from ..resources.common import CONTAINER_NAME

FAILED_WAITING_REASONS = frozenset(
    {
        "CrashLoopBackOff",
        "ImagePullBackOff",
        "ErrImagePull",
        "CreateContainerConfigError",
        "InvalidImageName",
    }
)


def _conditions(deployment: Dict[str, Any]) -> List[Dict[str, Any]]:
    return (deployment.get("status") or {}).get("conditions") or []


def is_available(deployment: Dict[str, Any]) -> bool:
    return any(
        c.get("type") == "Available" and c.get("status") == "True"
        for c in _conditions(deployment)
    )


def detect_workload_failure(
    deployment: Dict[str, Any], pods: List[Dict[str, Any]]
) -> Optional[str]:
    """Returns a human readable failure reason, or None if nothing is failing."""
    for condition in _conditions(deployment):
        if (
            condition.get("type") == "Progressing"
            and condition.get("status") == "False"
            and condition.get("reason") == "ProgressDeadlineExceeded"
        ):
            return f"Deployment progress deadline exceeded: {condition.get('message', '')}".strip()
        if condition.get("type") == "ReplicaFailure" and condition.get("status") == "True":
            return f"Deployment replica failure: {condition.get('message', '')}".strip()

    for pod in pods:
        pod_name = (pod.get("metadata") or {}).get("name", "unknown")
        statuses = (pod.get("status") or {}).get("containerStatuses") or []
        for container in statuses:
            if container.get("name") != CONTAINER_NAME:
                continue
            waiting = (container.get("state") or {}).get("waiting") or {}
            reason = waiting.get("reason")
            if reason in FAILED_WAITING_REASONS:
                return f"Container '{CONTAINER_NAME}' in pod '{pod_name}' is {reason}"

    return None
