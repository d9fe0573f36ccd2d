from typing import Any, Dict, List

from ...crds.devnet import Devnet, DevnetSpec
from .common import (
    CONTAINER_NAME,
    GATEWAY_PORT,
    GATEWAY_PORT_NAME,
    RPC_PORT,
    RPC_PORT_NAME,
    labels,
    object_metadata,
    selector_labels,
)


def build_container_args(spec: DevnetSpec) -> List[str]:
    """
    Builds the starknet-devnet command line.

    Flags are tested in a fixed order so that the same spec always produces
    the same list. Extra arguments are appended verbatim at the end.
    """
    args: List[str] = []

    if spec.lite_mode:
        args.append("--lite-mode")
    if spec.lite_mode_block_hash:
        args.append("--lite-mode-block-hash")
    if spec.lite_mode_deploy_hash:
        args.append("--lite-mode-deploy-hash")
    if spec.accounts is not None:
        args.append(f"--accounts={spec.accounts}")
    if spec.initial_balance is not None:
        args.append(f"--initial-balance={spec.initial_balance}")
    if spec.seed is not None:
        args.append(f"--seed={spec.seed}")
    if spec.start_time is not None:
        args.append(f"--start-time={spec.start_time}")
    if spec.gas_price is not None:
        args.append(f"--gas-price={spec.gas_price}")
    if spec.extra_args:
        args.extend(spec.extra_args)

    return args


def build_deployment(devnet: Devnet, default_image: str) -> Dict[str, Any]:
    """Builds the Deployment running the devnet container."""
    image = devnet.spec.image or default_image

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": object_metadata(devnet),
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": selector_labels(devnet)},
            "template": {
                "metadata": {"labels": labels(devnet)},
                "spec": {
                    "containers": [
                        {
                            "name": CONTAINER_NAME,
                            "image": image,
                            "args": build_container_args(devnet.spec),
                            "ports": [
                                {"name": RPC_PORT_NAME, "containerPort": RPC_PORT},
                                {"name": GATEWAY_PORT_NAME, "containerPort": GATEWAY_PORT},
                            ],
                        }
                    ],
                },
            },
        },
    }
