import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from rich.console import Console

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "ryogoku"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yml"
DEFAULT_CONFIG: Dict[str, Any] = {
    # Empty means "use the namespace of the current kubeconfig context".
    "namespace": "",
}


class Configuration:
    def __init__(self, config_data: Dict[str, Any]):
        self._config = config_data

    @property
    def namespace(self) -> Optional[str]:
        return self._config.get("namespace") or None


def get_default_config_path() -> Path:
    return DEFAULT_CONFIG_PATH


def create_default_config(path: Path) -> None:
    """Creates a default configuration file at the specified path."""
    console = Console()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(DEFAULT_CONFIG, f, default_flow_style=False)
        console.print(f"[green]✅ Default configuration created at {path}[/green]")
    except OSError as e:
        console.print(f"[red]Error creating default configuration: {e}[/red]")


def deep_merge(source, destination):
    for key, value in source.items():
        if isinstance(value, dict):
            node = destination.setdefault(key, {})
            deep_merge(value, node)
        else:
            destination[key] = value
    return destination


def load_config(config_path: Optional[Path]) -> Configuration:
    config_data = copy.deepcopy(DEFAULT_CONFIG)
    if config_path and config_path.exists():
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f)
        if user_config:
            config_data = deep_merge(user_config, config_data)
    return Configuration(config_data)
