"""
Desired shape of the Kubernetes objects owned by a devnet.

The reconciler only sees the list returned by `build_manifests` and
addresses each child by its `kind`, so the set of children can change here
without touching the reconciler.
"""
from typing import Any, Dict, List

from ...crds.devnet import Devnet
from .deployment import build_deployment
from .service import build_service


def build_manifests(devnet: Devnet, default_image: str) -> List[Dict[str, Any]]:
    """Returns the owned children in creation order."""
    return [
        build_deployment(devnet, default_image),
        build_service(devnet),
    ]


__all__ = ["build_manifests", "build_deployment", "build_service"]
