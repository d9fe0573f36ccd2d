"""
Kubernetes operator for Devnet custom resources.

This module contains the startup handler and the bootstrap check. The Devnet
handlers live in the devnet package:
- Manifest building (resources/)
- State machine (devnet/reconciler.py)
- Finalizer coordination (devnet/finalizer.py)
- Retry policy (devnet/policy.py)
"""
import logging
from typing import Any, Optional, Sequence

import kopf

from ..utils.kube import KubernetesConfigurationError, configure_kube_client
from .config import config as operator_config
from .errors import CrdNotInstalledError
from .store import ResourceStore


async def ensure_crd_installed(store: ResourceStore, logger: logging.Logger) -> None:
    """
    Checks that devnets can be listed before any watch starts.

    Raises:
        CrdNotInstalledError: If the list call fails for any reason.
    """
    try:
        await store.list_devnets(limit=1)
    except Exception as e:
        logger.error(f"devnet CRD is not queryable: {e}")
        logger.info("install CRD with `ryogoku crd install`")
        raise CrdNotInstalledError() from e


@kopf.on.startup()
async def on_startup(
    settings: kopf.OperatorSettings, logger: logging.Logger, **kwargs: Any
) -> None:
    """
    Handle the startup of the operator.

    This configures the client, refuses to start without the CRD and sets
    operator-wide settings.
    """
    try:
        configure_kube_client(logger)
    except KubernetesConfigurationError as exc:
        raise kopf.PermanentError(str(exc)) from exc

    try:
        await ensure_crd_installed(ResourceStore(), logger)
    except CrdNotInstalledError as exc:
        raise kopf.PermanentError(str(exc)) from exc

    # kopf and the finalizer coordinator must agree on the token so that
    # kopf treats devnets carrying it as blocked for deletion.
    settings.persistence.finalizer = operator_config.finalizer

    # Unbounded workers would hit the API server with every devnet at once on
    # restart.
    settings.batching.worker_limit = operator_config.worker_limit

    # Off by default: every log line would otherwise become a k8s Event.
    settings.posting.enabled = operator_config.posting_enabled

    logger.info("Operator started.")


def run(namespaces: Optional[Sequence[str]] = None) -> None:
    """Run the operator in the foreground until interrupted."""
    kopf.run(
        registry=kopf.get_default_registry(),
        standalone=True,
        clusterwide=not namespaces,
        namespaces=list(namespaces or []),
    )
