"""
State machine driving a single devnet towards its desired state.

| state   | action                                   | next                          |
|---------|------------------------------------------|-------------------------------|
| Created | get-or-create children                   | Running, requeue              |
| Running | get-or-create children, check workload   | Errored on failure, else wait |
| Errored | get-or-create children, check workload   | Running once available        |

Children are never overwritten: an existing child, whatever its content, is
left alone, and only a missing one is recreated.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from kubernetes import client

from ...crds.devnet import Devnet, DevnetState, DevnetStatus
from ..config import OperatorConfig, config as operator_config
from ..resources import build_manifests
from ..resources.common import DEVNET_NAME_LABEL
from ..store import ResourceStore
from .health import detect_workload_failure, is_available
from .policy import Action

ManifestBuilder = Callable[[Devnet, str], List[Dict[str, Any]]]


class DevnetReconciler:
    """Creates the children of a devnet and keeps its status up to date."""

    def __init__(
        self,
        store: ResourceStore,
        config: OperatorConfig = operator_config,
        manifest_builder: ManifestBuilder = build_manifests,
    ) -> None:
        self.store = store
        self.config = config
        self.manifest_builder = manifest_builder

    def desired_children(self, devnet: Devnet) -> List[Dict[str, Any]]:
        return self.manifest_builder(devnet, self.config.default_image)

    async def reconcile(self, devnet: Devnet, logger: logging.Logger) -> Action:
        logger.debug(f"Reconciling devnet '{devnet.name}' from state {devnet.state}")

        if devnet.state is DevnetState.CREATED:
            await self.ensure_children(devnet, logger)
            await self._set_status(devnet, DevnetStatus(DevnetState.RUNNING), logger)
            # Re-check later in case the status write was lost.
            return Action.requeue(self.config.requeue_interval)

        if devnet.state is DevnetState.RUNNING:
            children = await self.ensure_children(devnet, logger)
            failure = await self._workload_failure(devnet, children)
            if failure:
                logger.warning(f"Devnet '{devnet.name}' workload failed: {failure}")
                await self._set_status(
                    devnet, DevnetStatus(DevnetState.ERRORED, failure), logger
                )
                return Action.requeue(self.config.requeue_interval)
            return Action.await_change()

        if devnet.state is DevnetState.ERRORED:
            children = await self.ensure_children(devnet, logger)
            failure = await self._workload_failure(devnet, children)
            if failure is None and is_available(children.get("Deployment") or {}):
                logger.info(f"Devnet '{devnet.name}' workload recovered.")
                await self._set_status(devnet, DevnetStatus(DevnetState.RUNNING), logger)
                return Action.await_change()
            if failure and failure != devnet.status.message:
                await self._set_status(
                    devnet, DevnetStatus(DevnetState.ERRORED, failure), logger
                )
            return Action.requeue(self.config.requeue_interval)

        raise ValueError(f"Unhandled devnet state {devnet.state!r}")

    async def ensure_children(
        self, devnet: Devnet, logger: logging.Logger
    ) -> Dict[str, Dict[str, Any]]:
        """Gets or creates every child, returning them keyed by kind."""
        children = {}
        for manifest in self.desired_children(devnet):
            children[manifest["kind"]] = await self._get_or_create(manifest, logger)
        return children

    async def _get_or_create(
        self, manifest: Dict[str, Any], logger: logging.Logger
    ) -> Dict[str, Any]:
        kind = manifest["kind"]
        name = manifest["metadata"]["name"]
        namespace = manifest["metadata"]["namespace"]

        existing = await self.store.get_child(kind, name, namespace)
        if existing is not None:
            logger.info(f"{kind} '{name}' already exists in namespace '{namespace}'.")
            return existing

        try:
            created = await self.store.create_child(manifest)
        except client.ApiException as e:
            if e.status != 409:
                raise
            # Someone created it between our read and our create.
            existing = await self.store.get_child(kind, name, namespace)
            if existing is None:
                raise
            logger.info(f"{kind} '{name}' was created concurrently, adopting it.")
            return existing

        logger.info(f"{kind} '{name}' created in namespace '{namespace}'.")
        return created

    async def _workload_failure(
        self, devnet: Devnet, children: Dict[str, Dict[str, Any]]
    ) -> Optional[str]:
        pods = await self.store.list_pods(
            devnet.namespace, label_selector=f"{DEVNET_NAME_LABEL}={devnet.name}"
        )
        return detect_workload_failure(children.get("Deployment") or {}, pods)

    async def _set_status(
        self, devnet: Devnet, status: DevnetStatus, logger: logging.Logger
    ) -> None:
        await self.store.apply_devnet_status(
            devnet, status, field_manager=self.config.field_manager, force=True
        )
        logger.info(f"Devnet '{devnet.name}' status updated to {status.state}.")
