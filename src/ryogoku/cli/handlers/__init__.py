"""
This module contains the handler functions for the CLI commands.
"""
from .create import create_devnet
from .crd import install_crd, print_crd
from .delete import delete_devnet
from .describe import describe_devnet
from .list import list_devnets
from .operator import run_operator

__all__ = [
    "create_devnet",
    "delete_devnet",
    "describe_devnet",
    "install_crd",
    "list_devnets",
    "print_crd",
    "run_operator",
]
