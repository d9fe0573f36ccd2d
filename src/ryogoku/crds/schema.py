"""CustomResourceDefinition for the Devnet resource."""
from typing import Any, Dict

from .const import (
    CRD_GROUP,
    CRD_KIND_DEVNET,
    CRD_NAME_DEVNET,
    CRD_PLURAL_DEVNET,
    CRD_SINGULAR_DEVNET,
    CRD_VERSION,
)
from .devnet import DevnetState


def _spec_schema() -> Dict[str, Any]:
    int_or_string = {"x-kubernetes-int-or-string": True}
    return {
        "type": "object",
        "description": "StarkNet development network.",
        "properties": {
            "image": {"type": "string", "nullable": True},
            "liteMode": {"type": "boolean", "nullable": True},
            "liteModeBlockHash": {"type": "boolean", "nullable": True},
            "liteModeDeployHash": {"type": "boolean", "nullable": True},
            "accounts": {"type": "integer", "format": "int32", "minimum": 0, "nullable": True},
            "initialBalance": dict(int_or_string, nullable=True),
            "seed": dict(int_or_string, nullable=True),
            "startTime": {"type": "integer", "format": "int64", "nullable": True},
            "gasPrice": dict(int_or_string, nullable=True),
            "extraArgs": {
                "type": "array",
                "items": {"type": "string"},
                "nullable": True,
            },
            "serviceType": {
                "type": "string",
                "enum": ["ClusterIP", "NodePort", "LoadBalancer", "ExternalName"],
                "nullable": True,
            },
        },
    }


def _status_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "nullable": True,
        "properties": {
            "state": {
                "type": "string",
                "enum": [state.value for state in DevnetState],
            },
            "message": {"type": "string"},
            # kopf keeps handler progress here.
            "kopf": {"type": "object", "x-kubernetes-preserve-unknown-fields": True},
        },
    }


def build_crd() -> Dict[str, Any]:
    """Builds the CRD manifest that `ryogoku crd install` submits."""
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": CRD_NAME_DEVNET},
        "spec": {
            "group": CRD_GROUP,
            "names": {
                "kind": CRD_KIND_DEVNET,
                "plural": CRD_PLURAL_DEVNET,
                "singular": CRD_SINGULAR_DEVNET,
                "shortNames": [CRD_SINGULAR_DEVNET],
            },
            "scope": "Namespaced",
            "versions": [
                {
                    "name": CRD_VERSION,
                    "served": True,
                    "storage": True,
                    "schema": {
                        "openAPIV3Schema": {
                            "type": "object",
                            "title": CRD_KIND_DEVNET,
                            "required": ["spec"],
                            "properties": {
                                "spec": _spec_schema(),
                                "status": _status_schema(),
                            },
                        }
                    },
                    "subresources": {"status": {}},
                    "additionalPrinterColumns": [
                        {"name": "State", "type": "string", "jsonPath": ".status.state"},
                        {
                            "name": "Age",
                            "type": "date",
                            "jsonPath": ".metadata.creationTimestamp",
                        },
                    ],
                }
            ],
        },
    }
