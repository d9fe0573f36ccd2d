import logging

from kubernetes import config


class KubernetesConfigurationError(Exception):
    """Raised when neither in-cluster nor kubeconfig credentials can be loaded."""


def configure_kube_client(logger: logging.Logger) -> None:
    """Loads in-cluster credentials, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
        logger.info("Using in-cluster Kubernetes configuration.")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.info("Using local kubeconfig.")
        except config.ConfigException as e:
            logger.error(f"Could not configure Kubernetes client: {e}")
            raise KubernetesConfigurationError(
                "Could not configure Kubernetes client."
            ) from e
