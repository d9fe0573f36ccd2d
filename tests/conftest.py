"""
This file contains shared fixtures for all tests.

Unit tests run against `FakeStore`, an in-memory stand-in for the API server
that speaks the same interface as `ryogoku.operator.store.ResourceStore`.
Tests that need a real cluster live in tests/e2e.
"""
import copy
import itertools
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

import pytest
from kubernetes.client.rest import ApiException

from ryogoku.cli.config import Configuration
from ryogoku.crds.const import CRD_API_VERSION, CRD_KIND_DEVNET
from ryogoku.crds.devnet import Devnet, DevnetStatus
from ryogoku.operator.config import OperatorConfig

TEST_NAMESPACE = "default"


def not_found() -> ApiException:
    return ApiException(status=404, reason="Not Found")


def conflict() -> ApiException:
    return ApiException(status=409, reason="Conflict")


class FakeStore:
    """
    In-memory API server.

    Devnets are stored as wire dictionaries. A devnet that is marked for
    deletion is erased as soon as its finalizer list becomes empty, the same
    way the API server does it.
    """

    def __init__(self) -> None:
        self.devnets: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.children: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        self.pods: Dict[str, List[Dict[str, Any]]] = {}
        self.status_writes: List[Tuple[str, DevnetStatus, str]] = []
        self.created: List[Tuple[str, str]] = []
        self.deleted: List[Tuple[str, str]] = []
        self.annotated: List[Tuple[str, Dict[str, str]]] = []
        # Set to make the next create of that kind race with another writer.
        self.race_on_create: Optional[str] = None
        self._versions = itertools.count(1)

    # --- test helpers ---

    def add_devnet(
        self,
        name: str,
        namespace: str = TEST_NAMESPACE,
        spec: Optional[Dict[str, Any]] = None,
        status: Optional[Dict[str, Any]] = None,
        finalizers: Optional[List[str]] = None,
    ) -> Devnet:
        body: Dict[str, Any] = {
            "apiVersion": CRD_API_VERSION,
            "kind": CRD_KIND_DEVNET,
            "metadata": {
                "name": name,
                "namespace": namespace,
                "uid": str(uuid.uuid4()),
                "resourceVersion": str(next(self._versions)),
                "creationTimestamp": "2024-01-01T00:00:00Z",
                "finalizers": list(finalizers or []),
            },
            "spec": dict(spec or {}),
        }
        if status is not None:
            body["status"] = dict(status)
        self.devnets[(namespace, name)] = body
        return Devnet.from_dict(copy.deepcopy(body))

    def mark_deleted(self, name: str, namespace: str = TEST_NAMESPACE) -> Devnet:
        body = self.devnets[(namespace, name)]
        if not body["metadata"].get("finalizers"):
            del self.devnets[(namespace, name)]
            return Devnet.from_dict(copy.deepcopy(body))
        body["metadata"]["deletionTimestamp"] = "2024-01-01T01:00:00Z"
        body["metadata"]["resourceVersion"] = str(next(self._versions))
        return Devnet.from_dict(copy.deepcopy(body))

    def current(self, name: str, namespace: str = TEST_NAMESPACE) -> Optional[Devnet]:
        body = self.devnets.get((namespace, name))
        return Devnet.from_dict(copy.deepcopy(body)) if body else None

    def child(self, kind: str, name: str, namespace: str = TEST_NAMESPACE) -> Optional[Dict[str, Any]]:
        return self.children.get((kind, namespace, name))

    def set_child_status(self, kind: str, name: str, status: Dict[str, Any],
                         namespace: str = TEST_NAMESPACE) -> None:
        self.children[(kind, namespace, name)]["status"] = status

    # --- ResourceStore interface ---

    async def get_child(self, kind: str, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        obj = self.children.get((kind, namespace, name))
        return copy.deepcopy(obj) if obj is not None else None

    async def create_child(self, manifest: Dict[str, Any]) -> Dict[str, Any]:
        kind = manifest["kind"]
        key = (kind, manifest["metadata"]["namespace"], manifest["metadata"]["name"])
        if self.race_on_create == kind:
            self.race_on_create = None
            self.children[key] = copy.deepcopy(manifest)
            raise conflict()
        if key in self.children:
            raise conflict()
        obj = copy.deepcopy(manifest)
        obj["metadata"]["uid"] = str(uuid.uuid4())
        self.children[key] = obj
        self.created.append((kind, key[2]))
        return copy.deepcopy(obj)

    async def delete_child(self, kind: str, name: str, namespace: str) -> None:
        if (kind, namespace, name) not in self.children:
            raise not_found()
        del self.children[(kind, namespace, name)]
        self.deleted.append((kind, name))

    async def list_pods(self, namespace: str, label_selector: str) -> List[Dict[str, Any]]:
        key, _, value = label_selector.partition("=")
        return [
            copy.deepcopy(pod)
            for pod in self.pods.get(namespace, [])
            if (pod.get("metadata", {}).get("labels") or {}).get(key) == value
        ]

    async def get_devnet(self, name: str, namespace: str) -> Optional[Devnet]:
        return self.current(name, namespace)

    async def list_devnets(self, namespace: Optional[str] = None,
                           limit: Optional[int] = None) -> List[Devnet]:
        items = [
            Devnet.from_dict(copy.deepcopy(body))
            for (ns, _), body in sorted(self.devnets.items())
            if namespace is None or ns == namespace
        ]
        return items[:limit] if limit is not None else items

    async def apply_devnet_status(self, devnet: Devnet, status: DevnetStatus,
                                  field_manager: str, force: bool = True) -> None:
        body = self.devnets.get((devnet.namespace, devnet.name))
        if body is None:
            raise not_found()
        body["status"] = status.to_dict()
        body["metadata"]["resourceVersion"] = str(next(self._versions))
        self.status_writes.append((devnet.name, status, field_manager))

    async def annotate_devnet(self, name: str, namespace: str, annotations: Dict[str, str]) -> None:
        body = self.devnets.get((namespace, name))
        if body is None:
            raise not_found()
        body["metadata"].setdefault("annotations", {}).update(annotations)
        body["metadata"]["resourceVersion"] = str(next(self._versions))
        self.annotated.append((name, dict(annotations)))

    async def set_devnet_finalizers(self, devnet: Devnet, finalizers: List[str]) -> Devnet:
        key = (devnet.namespace, devnet.name)
        body = self.devnets.get(key)
        if body is None:
            raise not_found()
        expected = devnet.metadata.resource_version
        if expected and body["metadata"]["resourceVersion"] != expected:
            raise conflict()
        body["metadata"]["finalizers"] = list(finalizers)
        body["metadata"]["resourceVersion"] = str(next(self._versions))
        result = Devnet.from_dict(copy.deepcopy(body))
        if body["metadata"].get("deletionTimestamp") and not finalizers:
            del self.devnets[key]
        return result


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def operator_config() -> OperatorConfig:
    return OperatorConfig()


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("ryogoku.tests")


@pytest.fixture
def test_config() -> Configuration:
    return Configuration({"namespace": TEST_NAMESPACE})
