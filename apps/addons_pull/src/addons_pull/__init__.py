from addons_pull.config import ConfigError, PullConfig, load_config
from addons_pull.pipeline import PullResult, run_pull

__all__ = [
    "ConfigError",
    "PullConfig",
    "PullResult",
    "load_config",
    "run_pull",
]
