from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from kubernetes import client


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parses an RFC 3339 timestamp as written by the API server."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class ObjectMeta:
    name: str
    namespace: Optional[str] = None
    uid: Optional[str] = None
    resource_version: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    finalizers: List[str] = field(default_factory=list)
    creation_timestamp: Optional[datetime] = None
    deletion_timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ObjectMeta":
        return cls(
            name=data["name"],
            namespace=data.get("namespace"),
            uid=data.get("uid"),
            resource_version=data.get("resourceVersion"),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            finalizers=list(data.get("finalizers") or []),
            creation_timestamp=parse_timestamp(data.get("creationTimestamp")),
            deletion_timestamp=parse_timestamp(data.get("deletionTimestamp")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.uid:
            data["uid"] = self.uid
        if self.resource_version:
            data["resourceVersion"] = self.resource_version
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.finalizers:
            data["finalizers"] = list(self.finalizers)
        return data


class BaseCustomResource:
    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool

    @classmethod
    def api_version(cls) -> str:
        return f"{cls.group}/{cls.version}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BaseCustomResource":
        raise NotImplementedError

    @classmethod
    def get(
        cls,
        name: str,
        *,
        namespace: Optional[str] = None,
        api: Optional[client.CustomObjectsApi] = None,
    ) -> "BaseCustomResource":
        api_instance = api or client.CustomObjectsApi()
        if cls.namespaced:
            if not namespace:
                raise ValueError("Namespace is required for namespaced resources")
            data = api_instance.get_namespaced_custom_object(
                group=cls.group,
                version=cls.version,
                namespace=namespace,
                plural=cls.plural,
                name=name,
            )
        else:
            if namespace:
                raise ValueError("Cluster-scoped resources must not receive a namespace")
            data = api_instance.get_cluster_custom_object(
                group=cls.group,
                version=cls.version,
                plural=cls.plural,
                name=name,
            )
        return cls.from_dict(data)

    @classmethod
    def list(
        cls,
        *,
        namespace: Optional[str] = None,
        api: Optional[client.CustomObjectsApi] = None,
    ) -> List["BaseCustomResource"]:
        """Lists resources in one namespace, or everywhere when namespace is None."""
        api_instance = api or client.CustomObjectsApi()
        if cls.namespaced and namespace:
            data = api_instance.list_namespaced_custom_object(
                group=cls.group,
                version=cls.version,
                namespace=namespace,
                plural=cls.plural,
            )
        else:
            data = api_instance.list_cluster_custom_object(
                group=cls.group,
                version=cls.version,
                plural=cls.plural,
            )
        return [cls.from_dict(item) for item in data.get("items", [])]
