"""
kopf handlers for Devnet resources.

The handlers are kept thin: they turn the body kopf hands over into a Devnet,
run it through the finalizer coordinator and translate failures into kopf
retries using the error policy. Only handlers keyed by the devnet itself
reconcile; the timer and owned-object events annotate the devnet instead.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import kopf
from kubernetes import client

from ...crds.const import CRD_GROUP, CRD_PLURAL_DEVNET, CRD_VERSION
from ...crds.devnet import Devnet, DevnetState
from ..config import config as operator_config
from ..errors import FinalizerError
from ..resources.common import DEVNET_NAME_LABEL
from ..store import ResourceStore
from .finalizer import FinalizerCoordinator
from .policy import Action, ErrorPolicy
from .reconciler import DevnetReconciler

error_policy = ErrorPolicy.from_config(operator_config)

# Touched to make kopf re-run the update handler of a devnet.
CHILD_CHANGED_ANNOTATION = f"{CRD_GROUP}/child-changed"
RESYNC_ANNOTATION = f"{CRD_GROUP}/resync-at"


def build_coordinator(store: Optional[ResourceStore] = None) -> FinalizerCoordinator:
    store = store or ResourceStore()
    reconciler = DevnetReconciler(store, config=operator_config)
    return FinalizerCoordinator(store, reconciler, finalizer=operator_config.finalizer)


async def drive(devnet: Devnet, retry: int, logger: logging.Logger,
                store: Optional[ResourceStore] = None) -> Action:
    """Runs one reconcile attempt, raising kopf.TemporaryError when it must be retried."""
    coordinator = build_coordinator(store)
    try:
        action = await coordinator.run(devnet, logger)
    except FinalizerError as e:
        retry_action = error_policy.on_error(e, retry, logger)
        raise kopf.TemporaryError(str(e), delay=retry_action.requeue_after) from e

    if action.requeue_after is not None:
        logger.debug(f"Devnet '{devnet.name}' will be re-checked in {action.requeue_after:.0f}s.")
    return action


@kopf.on.resume(CRD_GROUP, CRD_VERSION, CRD_PLURAL_DEVNET)
@kopf.on.create(CRD_GROUP, CRD_VERSION, CRD_PLURAL_DEVNET)
@kopf.on.update(CRD_GROUP, CRD_VERSION, CRD_PLURAL_DEVNET)
async def reconcile_devnet(
    body: Dict[str, Any],
    name: str,
    namespace: str,
    logger: logging.Logger,
    retry: int = 0,
    **kwargs: Any,
) -> None:
    """Handle the creation, update or operator-restart discovery of a Devnet."""
    logger.info(f"Reconciling devnet '{name}' in namespace '{namespace}'...")
    await drive(Devnet.from_dict(body), retry, logger)


@kopf.on.delete(CRD_GROUP, CRD_VERSION, CRD_PLURAL_DEVNET)
async def delete_devnet(
    body: Dict[str, Any],
    name: str,
    namespace: str,
    logger: logging.Logger,
    retry: int = 0,
    **kwargs: Any,
) -> None:
    """Handle the deletion of a Devnet: children go first, then the finalizer."""
    logger.info(f"Devnet '{name}' in namespace '{namespace}' is being deleted.")
    await drive(Devnet.from_dict(body), retry, logger)


async def nudge_devnet(
    store: ResourceStore,
    name: str,
    namespace: str,
    annotation: str,
    value: str,
    logger: logging.Logger,
) -> bool:
    """
    Touches an annotation on the devnet so that kopf runs `reconcile_devnet`
    for it as an update.

    Paths that are not keyed by the devnet (owned-object events, timers) go
    through here instead of reconciling themselves, so every reconcile and
    cleanup of a devnet is serialized by kopf under the devnet's own key.
    Returns False when the devnet no longer exists.
    """
    try:
        await store.annotate_devnet(name, namespace, {annotation: value})
    except client.ApiException as e:
        if e.status != 404:
            raise
        logger.debug(f"Devnet '{namespace}/{name}' is gone, nothing to re-check.")
        return False
    return True


@kopf.timer(
    CRD_GROUP,
    CRD_VERSION,
    CRD_PLURAL_DEVNET,
    interval=operator_config.requeue_interval,
    initial_delay=operator_config.requeue_interval,
)
async def resync_devnet(
    body: Dict[str, Any],
    logger: logging.Logger,
    **kwargs: Any,
) -> None:
    """Periodic re-check, covering requeues and status writes that were lost."""
    devnet = Devnet.from_dict(body)
    if devnet.is_being_deleted:
        return
    await nudge_devnet(
        ResourceStore(),
        devnet.name,
        devnet.namespace,
        RESYNC_ANNOTATION,
        datetime.now(timezone.utc).isoformat(),
        logger,
    )


@kopf.on.event("apps", "v1", "deployments", labels={DEVNET_NAME_LABEL: kopf.PRESENT})
@kopf.on.event("", "v1", "services", labels={DEVNET_NAME_LABEL: kopf.PRESENT})
@kopf.on.event("", "v1", "pods", labels={DEVNET_NAME_LABEL: kopf.PRESENT})
async def owned_resource_event(
    event: Dict[str, Any],
    namespace: str,
    labels: Dict[str, str],
    logger: logging.Logger,
    **kwargs: Any,
) -> None:
    """
    Map a change on an owned object back to its devnet and ask for a re-check.

    Devnets still in `Created` are left to their own handlers, as are devnets
    that are gone or being deleted.
    """
    if event.get("type") not in ("MODIFIED", "DELETED"):
        return

    store = ResourceStore()
    devnet = await store.get_devnet(labels[DEVNET_NAME_LABEL], namespace)
    if devnet is None or devnet.is_being_deleted:
        return
    if devnet.state is DevnetState.CREATED:
        return

    obj = event.get("object") or {}
    kind = obj.get("kind", "object")
    resource_version = (obj.get("metadata") or {}).get("resourceVersion") or event["type"]
    logger.debug(f"{kind} of devnet '{devnet.name}' changed ({event['type']}), re-checking.")
    await nudge_devnet(
        store,
        devnet.name,
        devnet.namespace,
        CHILD_CHANGED_ANNOTATION,
        f"{kind}/{resource_version}",
        logger,
    )
