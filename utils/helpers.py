import os
import yaml

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def load_config(config_path=None):
    """
    Read the YAML config.  Resolution order: explicit path, then the
    CRICTRACK_CONFIG_PATH environment variable, then config/config.yaml.
    """
    if config_path is None:
        config_path = os.getenv("CRICTRACK_CONFIG_PATH") or os.path.join(
            PROJECT_ROOT, "config", "config.yaml"
        )
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
