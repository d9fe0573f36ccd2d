"""
Async access to the Kubernetes API server for the Devnet operator.

The kubernetes client is synchronous, so every call runs in a worker thread
through `asyncio.to_thread`. These calls are the only points where a
reconcile suspends. Objects are returned as plain dictionaries in their
wire (camelCase) form.
"""
import asyncio
from typing import Any, Dict, List, Optional

from kubernetes import client

from ..crds.const import CRD_GROUP, CRD_PLURAL_DEVNET, CRD_VERSION
from ..crds.devnet import Devnet, DevnetStatus

APPLY_PATCH = "application/apply-patch+yaml"
MERGE_PATCH = "application/merge-patch+json"

# kind -> (api attribute, method suffix)
CHILD_KINDS = {
    "Deployment": ("apps_v1", "deployment"),
    "Service": ("core_v1", "service"),
}


class ResourceStore:
    """Reads and writes devnets and their owned children."""

    def __init__(
        self,
        custom_objects_api: Optional[client.CustomObjectsApi] = None,
        apps_v1: Optional[client.AppsV1Api] = None,
        core_v1: Optional[client.CoreV1Api] = None,
        api_client: Optional[client.ApiClient] = None,
    ) -> None:
        self.custom_objects_api = custom_objects_api or client.CustomObjectsApi()
        self.apps_v1 = apps_v1 or client.AppsV1Api()
        self.core_v1 = core_v1 or client.CoreV1Api()
        self.api_client = api_client or client.ApiClient()

    def _to_dict(self, obj: Any) -> Dict[str, Any]:
        return self.api_client.sanitize_for_serialization(obj)

    def _child_method(self, verb: str, kind: str) -> Any:
        try:
            api_name, suffix = CHILD_KINDS[kind]
        except KeyError:
            raise ValueError(f"Unsupported child kind '{kind}'")
        return getattr(getattr(self, api_name), f"{verb}_namespaced_{suffix}")

    # --- Owned children ---

    async def get_child(self, kind: str, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        """Returns the child, or None if it does not exist."""
        try:
            obj = await asyncio.to_thread(
                self._child_method("read", kind), name=name, namespace=namespace
            )
        except client.ApiException as e:
            if e.status == 404:
                return None
            raise
        return self._to_dict(obj)

    async def create_child(self, manifest: Dict[str, Any]) -> Dict[str, Any]:
        obj = await asyncio.to_thread(
            self._child_method("create", manifest["kind"]),
            namespace=manifest["metadata"]["namespace"],
            body=manifest,
        )
        return self._to_dict(obj)

    async def delete_child(self, kind: str, name: str, namespace: str) -> None:
        """Deletes the child. A missing child raises ApiException(404)."""
        await asyncio.to_thread(
            self._child_method("delete", kind),
            name=name,
            namespace=namespace,
            body=client.V1DeleteOptions(propagation_policy="Background"),
        )

    async def list_pods(self, namespace: str, label_selector: str) -> List[Dict[str, Any]]:
        pods = await asyncio.to_thread(
            self.core_v1.list_namespaced_pod,
            namespace=namespace,
            label_selector=label_selector,
        )
        return [self._to_dict(pod) for pod in pods.items]

    # --- Devnets ---

    async def get_devnet(self, name: str, namespace: str) -> Optional[Devnet]:
        try:
            data = await asyncio.to_thread(
                self.custom_objects_api.get_namespaced_custom_object,
                group=CRD_GROUP,
                version=CRD_VERSION,
                namespace=namespace,
                plural=CRD_PLURAL_DEVNET,
                name=name,
            )
        except client.ApiException as e:
            if e.status == 404:
                return None
            raise
        return Devnet.from_dict(data)

    async def list_devnets(
        self, namespace: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Devnet]:
        kwargs: Dict[str, Any] = {}
        if limit is not None:
            kwargs["limit"] = limit
        if namespace:
            data = await asyncio.to_thread(
                self.custom_objects_api.list_namespaced_custom_object,
                group=CRD_GROUP,
                version=CRD_VERSION,
                namespace=namespace,
                plural=CRD_PLURAL_DEVNET,
                **kwargs,
            )
        else:
            data = await asyncio.to_thread(
                self.custom_objects_api.list_cluster_custom_object,
                group=CRD_GROUP,
                version=CRD_VERSION,
                plural=CRD_PLURAL_DEVNET,
                **kwargs,
            )
        return [Devnet.from_dict(item) for item in data.get("items", [])]

    async def apply_devnet_status(
        self,
        devnet: Devnet,
        status: DevnetStatus,
        field_manager: str,
        force: bool = True,
    ) -> None:
        """
        Server-side applies the status sub-resource.

        Only the fields owned by `field_manager` are submitted; `force` takes
        over fields that another manager claimed.
        """
        body = {
            "apiVersion": devnet.api_version(),
            "kind": devnet.kind,
            "metadata": {"name": devnet.name, "namespace": devnet.namespace},
            "status": status.to_dict(),
        }
        await asyncio.to_thread(
            self.custom_objects_api.patch_namespaced_custom_object_status,
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=devnet.namespace,
            plural=CRD_PLURAL_DEVNET,
            name=devnet.name,
            body=body,
            field_manager=field_manager,
            force=force,
            _content_type=APPLY_PATCH,
        )

    async def set_devnet_finalizers(self, devnet: Devnet, finalizers: List[str]) -> Devnet:
        """
        Replaces the devnet's finalizer list.

        The patch carries the resourceVersion the list was computed from, so a
        concurrent writer makes it fail with 409 instead of being overwritten.
        """
        metadata: Dict[str, Any] = {"finalizers": finalizers}
        if devnet.metadata.resource_version:
            metadata["resourceVersion"] = devnet.metadata.resource_version
        body = {"metadata": metadata}
        data = await asyncio.to_thread(
            self.custom_objects_api.patch_namespaced_custom_object,
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=devnet.namespace,
            plural=CRD_PLURAL_DEVNET,
            name=devnet.name,
            body=body,
            _content_type=MERGE_PATCH,
        )
        return Devnet.from_dict(data)

    async def annotate_devnet(self, name: str, namespace: str, annotations: Dict[str, str]) -> None:
        """
        Merges `annotations` into the devnet's metadata.

        A missing devnet raises ApiException(404); a merge patch never
        creates the object.
        """
        await asyncio.to_thread(
            self.custom_objects_api.patch_namespaced_custom_object,
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=namespace,
            plural=CRD_PLURAL_DEVNET,
            name=name,
            body={"metadata": {"annotations": annotations}},
            _content_type=MERGE_PATCH,
        )
