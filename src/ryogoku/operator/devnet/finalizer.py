"""
Finalizer-coordinated dispatch of devnet reconciles.

A devnet carries our finalizer token for as long as it exists. While the
token is present the API server will not erase the devnet, which lets the
cleanup path delete the children explicitly before the token is released.
The owner references on the children are only a fallback for the garbage
collector; explicit cleanup is what guarantees that nothing outlives the
devnet.
"""
import logging
from dataclasses import dataclass
from typing import Union

from kubernetes import client

from ...crds.devnet import Devnet
from ..errors import FinalizerError
from ..store import ResourceStore
from .policy import Action
from .reconciler import DevnetReconciler


@dataclass(frozen=True)
class Apply:
    """The devnet should exist: converge it."""

    devnet: Devnet


@dataclass(frozen=True)
class Cleanup:
    """The devnet is being deleted: tear down its children."""

    devnet: Devnet


FinalizerEvent = Union[Apply, Cleanup]


def event_for(devnet: Devnet) -> FinalizerEvent:
    """The deletion marker, not the absence of the object, selects cleanup."""
    if devnet.is_being_deleted:
        return Cleanup(devnet)
    return Apply(devnet)


class FinalizerCoordinator:
    def __init__(
        self,
        store: ResourceStore,
        reconciler: DevnetReconciler,
        finalizer: str,
    ) -> None:
        self.store = store
        self.reconciler = reconciler
        self.finalizer = finalizer

    async def run(self, devnet: Devnet, logger: logging.Logger) -> Action:
        """Runs the apply or the cleanup path, wrapping any error in FinalizerError."""
        event = event_for(devnet)
        try:
            return await self._dispatch(event, logger)
        except Exception as e:
            raise FinalizerError(
                type(event).__name__.lower(), devnet.name, devnet.namespace, e
            ) from e

    async def _dispatch(self, event: FinalizerEvent, logger: logging.Logger) -> Action:
        if isinstance(event, Apply):
            devnet = await self._ensure_finalizer(event.devnet, logger)
            return await self.reconciler.reconcile(devnet, logger)
        if isinstance(event, Cleanup):
            await self.cleanup(event.devnet, logger)
            await self._release_finalizer(event.devnet, logger)
            return Action.await_change()
        raise TypeError(f"Unknown finalizer event {event!r}")

    async def cleanup(self, devnet: Devnet, logger: logging.Logger) -> None:
        """Deletes every child, newest first. Safe to run any number of times."""
        logger.debug(f"Cleaning up devnet '{devnet.name}'")
        for manifest in reversed(self.reconciler.desired_children(devnet)):
            kind = manifest["kind"]
            name = manifest["metadata"]["name"]
            try:
                await self.store.delete_child(kind, name, devnet.namespace)
                logger.info(f"{kind} '{name}' deleted from namespace '{devnet.namespace}'.")
            except client.ApiException as e:
                if e.status != 404:
                    raise
                logger.warning(
                    f"No {kind} '{name}' was found to delete, assuming there is nothing to do."
                )

    async def _ensure_finalizer(self, devnet: Devnet, logger: logging.Logger) -> Devnet:
        if devnet.has_finalizer(self.finalizer):
            return devnet
        updated = await self.store.set_devnet_finalizers(
            devnet, devnet.metadata.finalizers + [self.finalizer]
        )
        logger.info(f"Finalizer '{self.finalizer}' added to devnet '{devnet.name}'.")
        return updated

    async def _release_finalizer(self, devnet: Devnet, logger: logging.Logger) -> None:
        if not devnet.has_finalizer(self.finalizer):
            return
        remaining = [f for f in devnet.metadata.finalizers if f != self.finalizer]
        try:
            await self.store.set_devnet_finalizers(devnet, remaining)
        except client.ApiException as e:
            if e.status != 404:
                raise
            logger.info(f"Devnet '{devnet.name}' is already gone.")
            return
        logger.info(f"Finalizer '{self.finalizer}' removed from devnet '{devnet.name}'.")
