import sys

import yaml
from kubernetes import client
from rich.console import Console

from ..errors import KubeConfigError
from ..utils import load_kube_config
from ...crds.const import CRD_NAME_DEVNET
from ...crds.schema import build_crd


def print_crd() -> None:
    """Prints the Devnet CRD as YAML."""
    # Plain print so the output can be piped into kubectl.
    print(yaml.safe_dump(build_crd(), sort_keys=False), end="")


def install_crd(dry_run: bool = False) -> None:
    """Installs the Devnet CRD unless it already exists."""
    console = Console()
    try:
        load_kube_config()
    except KubeConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    api_extensions_v1 = client.ApiextensionsV1Api()
    try:
        api_extensions_v1.read_custom_resource_definition(name=CRD_NAME_DEVNET)
        console.print(f"CRD {CRD_NAME_DEVNET} already exists.")
        console.print()
        console.print("Nothing to do, bye! 🕹")
        return
    except client.ApiException as e:
        if e.status != 404:
            console.print(f"Error checking CRD {CRD_NAME_DEVNET}: {e.reason}")
            sys.exit(1)

    console.print(f"Creating CRD {CRD_NAME_DEVNET}...")
    kwargs = {"dry_run": "All"} if dry_run else {}
    try:
        api_extensions_v1.create_custom_resource_definition(body=build_crd(), **kwargs)
    except client.ApiException as e:
        console.print(" 🩹 Something went wrong:")
        console.print(f"Error: {e.reason}")
        sys.exit(1)

    console.print(" 📦 CRD installed." + (" (dry run)" if dry_run else ""))
    console.print()
    console.print("Thanks for using Ryogoku 🕹")
