import os
from pathlib import Path
from typing import Optional

import yaml

from prcommenter_core.retry import MAX_ATTEMPTS

DEFAULT_CONFIG: dict = {
    "max_attempts": MAX_ATTEMPTS,  # rate-limited write attempts before giving up
    "strict_duplicates": False,  # True = fail instead of picking one of several identical comments
    "replace_existing": True,  # False = leave an identical existing comment alone and skip the write
}


def load_config(config_path: str = ".prcommenter.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prcommenter.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
