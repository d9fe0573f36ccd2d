from pathlib import Path

import click
from rich.console import Console
from rich.prompt import Confirm

from . import handlers
from .config import create_default_config, get_default_config_path, load_config

SERVICE_TYPES = ["ClusterIP", "NodePort", "LoadBalancer", "ExternalName"]


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ryogoku config file.",
)
@click.option(
    "--assume-yes", is_flag=True, help="Automatically answer yes to all prompts."
)
@click.pass_context
def main(ctx, config_path, assume_yes) -> None:
    """Run and manage starknet devnets on Kubernetes."""
    ctx.ensure_object(dict)
    console = Console()

    default_config_path = get_default_config_path()
    effective_config_path = config_path if config_path else default_config_path

    if not effective_config_path.exists() and effective_config_path == default_config_path:
        console.print(f"Configuration file not found at [cyan]{effective_config_path}[/cyan].")
        if assume_yes or Confirm.ask("Would you like to create a default one?", default=True):
            create_default_config(effective_config_path)

    ctx.obj["CONFIG"] = load_config(effective_config_path)
    ctx.obj["ASSUME_YES"] = assume_yes


@main.group()
def crd() -> None:
    """Manage the devnet CustomResourceDefinition."""
    pass


@crd.command(name="print")
def crd_print() -> None:
    """Print the devnet CRD as YAML."""
    handlers.print_crd()


@crd.command(name="install")
@click.option("--dry-run", is_flag=True, help="Validate against the server without persisting.")
def crd_install(dry_run: bool) -> None:
    """Install the devnet CRD into the current cluster."""
    handlers.install_crd(dry_run=dry_run)


@main.group()
def devnet() -> None:
    """Manage devnets."""
    pass


namespace_option = click.option(
    "-n", "--namespace", type=str, default=None, help="Namespace of the devnet."
)


@devnet.command(help="Create a new devnet.")
@click.argument("name", type=str)
@namespace_option
@click.option("--image", type=str, default=None, help="The container image to use.")
@click.option("--lite-mode", is_flag=True, help="Run the devnet in lite mode.")
@click.option("--lite-mode-block-hash", is_flag=True, help="Skip block hash calculation.")
@click.option("--lite-mode-deploy-hash", is_flag=True, help="Skip deploy hash calculation.")
@click.option("--accounts", type=int, default=None, help="Number of predeployed accounts.")
@click.option("--initial-balance", type=str, default=None, help="Initial balance of each account.")
@click.option("--seed", type=str, default=None, help="Seed for the predeployed accounts.")
@click.option("--start-time", type=int, default=None, help="Timestamp of the genesis block.")
@click.option("--gas-price", type=str, default=None, help="Gas price in wei.")
@click.option(
    "--extra-arg",
    "extra_args",
    type=str,
    multiple=True,
    help="Extra argument passed to starknet-devnet. Can be repeated.",
)
@click.option(
    "--service-type",
    type=click.Choice(SERVICE_TYPES),
    default=None,
    help="Type of the Service exposing the devnet.",
)
@click.option("--wait", is_flag=True, help="Wait for the devnet to be running.")
@click.pass_context
def create(
    ctx,
    name: str,
    namespace: str,
    image: str,
    lite_mode: bool,
    lite_mode_block_hash: bool,
    lite_mode_deploy_hash: bool,
    accounts: int,
    initial_balance: str,
    seed: str,
    start_time: int,
    gas_price: str,
    extra_args: tuple,
    service_type: str,
    wait: bool,
) -> None:
    handlers.create_devnet(
        configuration=ctx.obj["CONFIG"],
        name=name,
        namespace=namespace,
        image=image,
        lite_mode=lite_mode,
        lite_mode_block_hash=lite_mode_block_hash,
        lite_mode_deploy_hash=lite_mode_deploy_hash,
        accounts=accounts,
        initial_balance=initial_balance,
        seed=seed,
        start_time=start_time,
        gas_price=gas_price,
        extra_args=list(extra_args),
        service_type=service_type,
        wait=wait,
    )


@devnet.command(name="list", help="List devnets.")
@namespace_option
@click.option(
    "-A", "--all-namespaces", is_flag=True, help="List devnets across all namespaces."
)
@click.pass_context
def list_command(ctx, namespace: str, all_namespaces: bool) -> None:
    handlers.list_devnets(
        configuration=ctx.obj["CONFIG"],
        namespace=namespace,
        all_namespaces=all_namespaces,
    )


@devnet.command(help="Describe a devnet.")
@click.argument("name", type=str)
@namespace_option
@click.pass_context
def describe(ctx, name: str, namespace: str) -> None:
    handlers.describe_devnet(configuration=ctx.obj["CONFIG"], name=name, namespace=namespace)


@devnet.command(help="Delete a devnet.")
@click.argument("name", type=str)
@namespace_option
@click.pass_context
def delete(ctx, name: str, namespace: str) -> None:
    handlers.delete_devnet(configuration=ctx.obj["CONFIG"], name=name, namespace=namespace)


@main.group()
def operator() -> None:
    """Run the devnet operator."""
    pass


@operator.command(name="run")
@click.option(
    "-n",
    "--namespace",
    "namespaces",
    type=str,
    multiple=True,
    help="Namespace to watch. Can be repeated. Defaults to all namespaces.",
)
@click.option("--verbose", is_flag=True, help="Verbose operator logging.")
@click.option("--debug", is_flag=True, help="Debug operator logging.")
def operator_run(namespaces: tuple, verbose: bool, debug: bool) -> None:
    """Run the devnet operator until interrupted."""
    handlers.run_operator(namespaces=list(namespaces), verbose=verbose, debug=debug)


if __name__ == "__main__":
    main()
