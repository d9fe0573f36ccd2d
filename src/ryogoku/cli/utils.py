from typing import Optional, Tuple

from kubernetes import config
from kubernetes.config import ConfigException

from .config import Configuration
from .errors import KubeConfigError


def load_kube_config() -> None:
    """Loads the local kubeconfig for CLI use."""
    try:
        config.load_kube_config()
    except (ConfigException, FileNotFoundError) as e:
        raise KubeConfigError(f"Could not load kubeconfig: {e}") from e


def get_current_context() -> Tuple[Optional[str], str]:
    """Returns the user and namespace of the active kubeconfig context."""
    try:
        _, active_context = config.list_kube_config_contexts()
    except (ConfigException, FileNotFoundError):
        return None, "default"
    context = (active_context or {}).get("context", {})
    return context.get("user"), context.get("namespace") or "default"


def resolve_namespace(configuration: Configuration, namespace: Optional[str] = None) -> str:
    """Explicit flag first, then the CLI config, then the kubeconfig context."""
    if namespace:
        return namespace
    if configuration.namespace:
        return configuration.namespace
    _, context_namespace = get_current_context()
    return context_namespace
