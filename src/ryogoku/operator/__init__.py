# NOTE: This is what registers our operator's functions with kopf so that
#       `kopf run -m ryogoku.operator` can work.
# flake8: noqa: F401
from .operator import on_startup
from .devnet.handler import (
    reconcile_devnet,
    delete_devnet,
    resync_devnet,
    owned_resource_event,
)
