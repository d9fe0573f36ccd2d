import sys
from typing import List, Optional

from kubernetes import client, watch
from rich.console import Console
from rich.status import Status

from ..config import Configuration
from ..errors import KubeConfigError
from ..utils import load_kube_config, resolve_namespace
from ...crds.const import CRD_API_VERSION, CRD_GROUP, CRD_KIND_DEVNET, CRD_PLURAL_DEVNET, CRD_VERSION
from ...crds.devnet import DevnetSpec, DevnetState


def _wait_for_devnet_running(name: str, namespace: str, console: Console) -> None:
    """Watches the Devnet until its state is 'Running'."""
    custom_objects_api = client.CustomObjectsApi()
    with Status(f"Waiting for devnet '{name}' to start...", console=console) as status:
        w = watch.Watch()
        for event in w.stream(
            custom_objects_api.list_namespaced_custom_object,
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=namespace,
            plural=CRD_PLURAL_DEVNET,
            field_selector=f"metadata.name={name}",
        ):
            status_data = event["object"].get("status", {})
            state = status_data.get("state", DevnetState.CREATED.value)
            if state == DevnetState.RUNNING.value:
                w.stop()
                break
            if state == DevnetState.ERRORED.value:
                w.stop()
                console.print(f"[red]Devnet '{name}' failed: {status_data.get('message', 'unknown error')}[/red]")
                sys.exit(1)
            status.update(f"Devnet '{name}' is in state: {state}")
    console.print(f"✅ Devnet '{name}' is running.")


def build_devnet_manifest(name: str, namespace: str, spec: DevnetSpec) -> dict:
    return {
        "apiVersion": CRD_API_VERSION,
        "kind": CRD_KIND_DEVNET,
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec.to_dict(),
    }


def create_devnet(
    configuration: Configuration,
    name: str,
    namespace: Optional[str] = None,
    image: Optional[str] = None,
    lite_mode: Optional[bool] = None,
    lite_mode_block_hash: Optional[bool] = None,
    lite_mode_deploy_hash: Optional[bool] = None,
    accounts: Optional[int] = None,
    initial_balance: Optional[str] = None,
    seed: Optional[str] = None,
    start_time: Optional[int] = None,
    gas_price: Optional[str] = None,
    extra_args: Optional[List[str]] = None,
    service_type: Optional[str] = None,
    wait: bool = False,
) -> None:
    """Creates a new Devnet resource."""
    console = Console()
    try:
        load_kube_config()
    except KubeConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    target_namespace = resolve_namespace(configuration, namespace)
    spec = DevnetSpec(
        image=image,
        lite_mode=lite_mode or None,
        lite_mode_block_hash=lite_mode_block_hash or None,
        lite_mode_deploy_hash=lite_mode_deploy_hash or None,
        accounts=accounts,
        initial_balance=initial_balance,
        seed=seed,
        start_time=start_time,
        gas_price=gas_price,
        extra_args=list(extra_args) if extra_args else None,
        service_type=service_type,
    )

    custom_objects_api = client.CustomObjectsApi()
    try:
        custom_objects_api.create_namespaced_custom_object(
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=target_namespace,
            plural=CRD_PLURAL_DEVNET,
            body=build_devnet_manifest(name, target_namespace, spec),
        )
    except client.ApiException as e:
        if e.status == 409:
            console.print(f"Error: devnet '{name}' already exists in namespace '{target_namespace}'.")
        elif e.status == 404:
            console.print("Error: the devnet CRD is not installed. Run `ryogoku crd install` first.")
        else:
            console.print(f"Error creating devnet: {e.reason}")
        sys.exit(1)

    console.print(f"devnet {name} created in namespace '{target_namespace}'")
    if wait:
        _wait_for_devnet_running(name, target_namespace, console)
