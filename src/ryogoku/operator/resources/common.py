from typing import Any, Dict

from ...crds.const import CRD_GROUP
from ...crds.devnet import Devnet

CONTAINER_NAME = "starknet-devnet"
RPC_PORT_NAME = "rpc"
RPC_PORT = 9575
GATEWAY_PORT_NAME = "gateway"
GATEWAY_PORT = 5050

APP_NAME_LABEL = "app.kubernetes.io/name"
DEVNET_NAME_LABEL = f"{CRD_GROUP}/devnet_name"


def selector_labels(devnet: Devnet) -> Dict[str, str]:
    return {DEVNET_NAME_LABEL: devnet.name}


def labels(devnet: Devnet) -> Dict[str, str]:
    return {
        APP_NAME_LABEL: devnet.name,
        DEVNET_NAME_LABEL: devnet.name,
    }


def owner_reference(devnet: Devnet) -> Dict[str, Any]:
    """Back-reference from a child to its devnet, used by the garbage collector."""
    return {
        "apiVersion": devnet.api_version(),
        "kind": devnet.kind,
        "name": devnet.name,
        "uid": devnet.uid,
        "controller": True,
        "blockOwnerDeletion": True,
    }


def object_metadata(devnet: Devnet) -> Dict[str, Any]:
    return {
        "name": devnet.name,
        "namespace": devnet.namespace,
        "labels": labels(devnet),
        "ownerReferences": [owner_reference(devnet)],
    }
