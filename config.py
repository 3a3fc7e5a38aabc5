import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".milestoneledger"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_TOKEN_MINUTES = 60
DEFAULT_LOG_LEVEL = "INFO"

def load_config() -> Dict[str, Any]:
    """Load config from ~/.milestoneledger/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., LEDGER_OWNER env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    ledger_cfg = config.get("ledger", {})
    config["ledger"] = {
        "owner": os.getenv("LEDGER_OWNER", ledger_cfg.get("owner", "")).strip(),
    }
    auth_cfg = config.get("auth", {})
    config["auth"] = {
        "secret": os.getenv("LEDGER_AUTH_SECRET", auth_cfg.get("secret", "")),
        "token_minutes": int(os.getenv(
            "LEDGER_TOKEN_MINUTES",
            auth_cfg.get("token_minutes", DEFAULT_TOKEN_MINUTES),
        )),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("LOG_LEVEL", logging_cfg.get("level", DEFAULT_LOG_LEVEL)).upper(),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('ledger', 'owner')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value

def get_ledger_owner() -> Optional[str]:
    """Principal allowed to verify any completion, or None when unset."""
    owner = get_config_value("ledger", "owner", "")
    return owner or None
