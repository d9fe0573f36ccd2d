import sys
from typing import Optional

import yaml
from kubernetes import client
from rich.console import Console

from ..config import Configuration
from ..errors import KubeConfigError
from ..utils import load_kube_config, resolve_namespace
from ...crds.const import CRD_GROUP, CRD_PLURAL_DEVNET, CRD_VERSION


def describe_devnet(
    configuration: Configuration, name: str, namespace: Optional[str] = None
) -> None:
    """Gets and displays the details of a Devnet."""
    console = Console()
    try:
        load_kube_config()
    except KubeConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    target_namespace = resolve_namespace(configuration, namespace)
    custom_objects_api = client.CustomObjectsApi()
    try:
        devnet = custom_objects_api.get_namespaced_custom_object(
            group=CRD_GROUP,
            version=CRD_VERSION,
            namespace=target_namespace,
            plural=CRD_PLURAL_DEVNET,
            name=name,
        )
    except client.ApiException as e:
        if e.status == 404:
            console.print(
                f"Error: devnet '{name}' not found in namespace '{target_namespace}'."
            )
        else:
            console.print(f"An error occurred: {e.reason}")
        sys.exit(1)

    console.print(yaml.safe_dump(devnet, sort_keys=False))
