import sys
from datetime import datetime, timezone
from typing import Optional

from kubernetes import client
from rich.console import Console
from rich.table import Table

from ..config import Configuration
from ..errors import KubeConfigError
from ..utils import load_kube_config, resolve_namespace
from ...crds.devnet import Devnet
from ...utils.time import format_age


def build_devnet_table(devnets: list, title: str, now: Optional[datetime] = None) -> Table:
    now = now or datetime.now(timezone.utc)
    table = Table(title=title, box=None)
    table.add_column("NAMESPACE", style="cyan")
    table.add_column("NAME", style="bold")
    table.add_column("STATE", style="green")
    table.add_column("AGE", style="magenta")
    for devnet in devnets:
        table.add_row(
            devnet.metadata.namespace or "",
            devnet.name,
            str(devnet.state),
            format_age(devnet.metadata.creation_timestamp, now),
        )
    return table


def list_devnets(
    configuration: Configuration,
    namespace: Optional[str] = None,
    all_namespaces: bool = False,
) -> None:
    """Lists devnets in a namespace, or across the cluster."""
    console = Console()
    try:
        load_kube_config()
    except KubeConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    target_namespace = None if all_namespaces else resolve_namespace(configuration, namespace)

    try:
        devnets = Devnet.list(namespace=target_namespace)
    except client.ApiException as e:
        console.print(f"An error occurred: {e.reason}")
        sys.exit(1)

    where = "all namespaces" if target_namespace is None else f"namespace '{target_namespace}'"
    if not devnets:
        console.print(f"No devnets found in {where}.")
        return

    console.print(build_devnet_table(devnets, title=f"Devnets in {where}"))
