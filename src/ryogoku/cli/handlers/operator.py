import asyncio
import logging
import sys
from typing import Optional, Sequence

import kopf
from rich.console import Console

from ...operator import operator as devnet_operator
from ...operator.errors import CrdNotInstalledError
from ...operator.store import ResourceStore
from ...utils.kube import KubernetesConfigurationError, configure_kube_client

# Distinct from click's usage errors (2) and generic failures (1).
EXIT_CRD_NOT_INSTALLED = 3

logger = logging.getLogger(__name__)


def run_operator(
    namespaces: Optional[Sequence[str]] = None,
    verbose: bool = False,
    debug: bool = False,
) -> None:
    """Checks the CRD is installed, then runs the operator until interrupted."""
    console = Console()
    kopf.configure(verbose=verbose, debug=debug)

    try:
        configure_kube_client(logger)
    except KubernetesConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    try:
        asyncio.run(devnet_operator.ensure_crd_installed(ResourceStore(), logger))
    except CrdNotInstalledError:
        console.print("[red]The devnet CRD is not installed.[/red]")
        console.print("Install it with [cyan]ryogoku crd install[/cyan] and try again.")
        sys.exit(EXIT_CRD_NOT_INSTALLED)

    if namespaces:
        console.print(f"👀 Watching namespace(s): {', '.join(namespaces)}")
    else:
        console.print("👀 Watching all namespaces")
    devnet_operator.run(namespaces)
