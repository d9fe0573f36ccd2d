# NOTE: Importing the handler module registers the Devnet handlers with kopf.
# flake8: noqa: F401
from . import handler
