import time
from typing import Any, Callable, Dict, Optional, TypeVar

import pytest
from kubernetes import client

from ryogoku.crds.const import CRD_GROUP, CRD_PLURAL_DEVNET, CRD_VERSION
from ryogoku.operator.resources.common import CONTAINER_NAME, DEVNET_NAME_LABEL

# Constants for polling
POLL_INTERVAL = 0.5

T = TypeVar("T")


def wait_for(
    callable: Callable[[], T],
    timeout: int = 30,
    interval: float = POLL_INTERVAL,
    failure_message: str = "Condition not met within timeout",
) -> T:
    """
    Polls a callable until it returns a truthy value or the timeout is
    reached. The callable returns a falsy value while the condition is not
    met yet.
    """
    start_time = time.time()
    while time.time() - start_time < timeout:
        result = callable()
        if result:
            return result
        time.sleep(interval)
    pytest.fail(failure_message)


# --- Object builders for unit tests ---


def deployment_status(available: bool = True, **condition_overrides: Any) -> Dict[str, Any]:
    conditions = [
        {"type": "Available", "status": "True" if available else "False"},
        {"type": "Progressing", "status": "True", "reason": "NewReplicaSetAvailable"},
    ]
    if condition_overrides:
        conditions.append(dict(condition_overrides))
    return {"conditions": conditions}


def devnet_pod(
    devnet_name: str,
    namespace: str = "default",
    waiting_reason: Optional[str] = None,
    container_name: str = CONTAINER_NAME,
) -> Dict[str, Any]:
    state: Dict[str, Any] = {"running": {"startedAt": "2024-01-01T00:00:00Z"}}
    if waiting_reason:
        state = {"waiting": {"reason": waiting_reason, "message": "back-off"}}
    return {
        "metadata": {
            "name": f"{devnet_name}-7d9f8c6b5-abcde",
            "namespace": namespace,
            "labels": {DEVNET_NAME_LABEL: devnet_name},
        },
        "status": {
            "phase": "Pending" if waiting_reason else "Running",
            "containerStatuses": [{"name": container_name, "state": state}],
        },
    }


# --- Cluster helpers for e2e tests ---


def read_or_none(read: Callable[..., Any], **kwargs: Any) -> Any:
    try:
        return read(**kwargs)
    except client.ApiException as e:
        if e.status == 404:
            return None
        raise


def wait_for_devnet_state(
    custom_objects_api: client.CustomObjectsApi,
    name: str,
    namespace: str,
    expected_state: str = "Running",
    timeout: int = 60,
) -> Dict[str, Any]:
    """Waits for a Devnet to reach a specific `.status.state`."""
    print(f"⏳ Waiting for devnet '{name}' to become '{expected_state}'...")

    def check():
        devnet = read_or_none(
            custom_objects_api.get_namespaced_custom_object,
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=namespace,
            plural=CRD_PLURAL_DEVNET,
            name=name,
        )
        if devnet and devnet.get("status", {}).get("state") == expected_state:
            return devnet
        return None

    devnet = wait_for(
        check,
        timeout=timeout,
        failure_message=f"Devnet '{name}' did not become '{expected_state}' within {timeout} seconds.",
    )
    print(f"✅ Devnet '{name}' is {expected_state}.")
    return devnet


def wait_for_deleted(read: Callable[..., Any], description: str, timeout: int = 60, **kwargs: Any) -> None:
    """Waits until `read(**kwargs)` answers 404."""
    print(f"⏳ Waiting for {description} to be deleted...")
    wait_for(
        lambda: read_or_none(read, **kwargs) is None,
        timeout=timeout,
        failure_message=f"{description} was not deleted within {timeout} seconds.",
    )
    print(f"✅ {description} deleted.")
