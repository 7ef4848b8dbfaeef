"""
Persisted client settings, ~/.uncharted_reach/config.json.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from uncharted_reach.transport.http import DEFAULT_BASE_URL

CONFIG_FILE = Path.home() / ".uncharted_reach" / "config.json"

logger = logging.getLogger(__name__)


class ReachConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    refresh_token: Optional[str] = None
    email: Optional[str] = None


def load_config(path: Optional[Path] = None) -> ReachConfig:
    path = path or CONFIG_FILE
    try:
        return ReachConfig.model_validate(json.loads(path.read_text()))
    except FileNotFoundError:
        return ReachConfig()
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return ReachConfig()


def save_config(cfg: ReachConfig, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cfg.model_dump_json(indent=2, exclude_none=True))
