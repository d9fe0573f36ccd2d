from typing import Any, Dict

from ...crds.devnet import Devnet
from .common import (
    GATEWAY_PORT,
    GATEWAY_PORT_NAME,
    RPC_PORT,
    RPC_PORT_NAME,
    object_metadata,
    selector_labels,
)


def build_service(devnet: Devnet) -> Dict[str, Any]:
    """Builds the Service exposing the devnet's rpc and gateway ports."""
    service_spec: Dict[str, Any] = {
        "selector": selector_labels(devnet),
        # Target ports are addressed by name so they follow the container spec.
        "ports": [
            {"name": RPC_PORT_NAME, "port": RPC_PORT, "targetPort": RPC_PORT_NAME},
            {"name": GATEWAY_PORT_NAME, "port": GATEWAY_PORT, "targetPort": GATEWAY_PORT_NAME},
        ],
    }

    # Unset means the API server picks its own default (ClusterIP).
    if devnet.spec.service_type is not None:
        service_spec["type"] = devnet.spec.service_type

    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": object_metadata(devnet),
        "spec": service_spec,
    }
