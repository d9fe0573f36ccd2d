"""
The Devnet custom resource.

Every spec field is optional. A field that is not set in the stored object
is kept as ``None`` so that "not configured" stays distinguishable from an
explicit zero or ``false``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .base import BaseCustomResource, ObjectMeta
from .const import (
    CRD_GROUP,
    CRD_KIND_DEVNET,
    CRD_PLURAL_DEVNET,
    CRD_VERSION,
)


class DevnetState(str, Enum):
    CREATED = "Created"
    RUNNING = "Running"
    ERRORED = "Errored"

    def __str__(self) -> str:
        return self.value


# Python attribute name -> field name in the stored object.
SPEC_FIELDS = {
    "image": "image",
    "lite_mode": "liteMode",
    "lite_mode_block_hash": "liteModeBlockHash",
    "lite_mode_deploy_hash": "liteModeDeployHash",
    "accounts": "accounts",
    "initial_balance": "initialBalance",
    "seed": "seed",
    "start_time": "startTime",
    "gas_price": "gasPrice",
    "extra_args": "extraArgs",
    "service_type": "serviceType",
}


@dataclass(frozen=True)
class DevnetSpec:
    image: Optional[str] = None
    lite_mode: Optional[bool] = None
    lite_mode_block_hash: Optional[bool] = None
    lite_mode_deploy_hash: Optional[bool] = None
    accounts: Optional[int] = None
    initial_balance: Optional[Union[int, str]] = None
    seed: Optional[Union[int, str]] = None
    start_time: Optional[int] = None
    gas_price: Optional[Union[int, str]] = None
    extra_args: Optional[List[str]] = None
    service_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DevnetSpec":
        data = data or {}
        values = {attr: data.get(key) for attr, key in SPEC_FIELDS.items()}
        if values["extra_args"] is not None:
            values["extra_args"] = [str(arg) for arg in values["extra_args"]]
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Serializes only the fields that are set."""
        return {
            key: getattr(self, attr)
            for attr, key in SPEC_FIELDS.items()
            if getattr(self, attr) is not None
        }


@dataclass(frozen=True)
class DevnetStatus:
    state: DevnetState = DevnetState.CREATED
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DevnetStatus":
        data = data or {}
        state = data.get("state")
        return cls(
            state=DevnetState(state) if state else DevnetState.CREATED,
            message=data.get("message"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"state": self.state.value}
        if self.message:
            data["message"] = self.message
        return data


@dataclass
class Devnet(BaseCustomResource):
    group = CRD_GROUP
    version = CRD_VERSION
    kind = CRD_KIND_DEVNET
    plural = CRD_PLURAL_DEVNET
    namespaced = True

    metadata: ObjectMeta
    spec: DevnetSpec = field(default_factory=DevnetSpec)
    status: DevnetStatus = field(default_factory=DevnetStatus)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Devnet":
        return cls(
            metadata=ObjectMeta.from_dict(data["metadata"]),
            spec=DevnetSpec.from_dict(data.get("spec")),
            status=DevnetStatus.from_dict(data.get("status")),
        )

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        if not self.metadata.namespace:
            raise ValueError(f"Devnet '{self.name}' has no namespace")
        return self.metadata.namespace

    @property
    def uid(self) -> str:
        if not self.metadata.uid:
            raise ValueError(f"Devnet '{self.name}' has no uid assigned yet")
        return self.metadata.uid

    @property
    def state(self) -> DevnetState:
        return self.status.state

    @property
    def is_being_deleted(self) -> bool:
        return self.metadata.deletion_timestamp is not None

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.metadata.finalizers

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "apiVersion": self.api_version(),
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }
        if self.status.state is not DevnetState.CREATED or self.status.message:
            data["status"] = self.status.to_dict()
        return data
