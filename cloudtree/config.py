import os
from typing import Mapping, Optional

DEFAULT_BASE_URL = "http://127.0.0.1:8000/api"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

class Settings:
    __slots__ = ['base_url', 'apikey', 'timeout', 'host', 'port', 'log_level', 'log_file']

    def __init__(self, base_url: str = DEFAULT_BASE_URL, apikey: str = "",
                 timeout: Optional[float] = None, host: str = DEFAULT_HOST,
                 port: int = DEFAULT_PORT, log_level: str = "INFO",
                 log_file: Optional[str] = None):
        self.base_url = base_url
        self.apikey = apikey
        self.timeout = timeout
        self.host = host
        self.port = port
        self.log_level = log_level
        self.log_file = log_file

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read CLOUDTREE_* environment variables, falling back to defaults"""
    env = os.environ if environ is None else environ

    timeout = env.get("CLOUDTREE_TIMEOUT")
    try:
        port = int(env.get("CLOUDTREE_PORT", DEFAULT_PORT))
        timeout = float(timeout) if timeout else None
    except ValueError as e:
        raise ValueError(f"Invalid cloudtree setting: {e}") from e

    return Settings(
        base_url=env.get("CLOUDTREE_BASE_URL", DEFAULT_BASE_URL),
        apikey=env.get("CLOUDTREE_APIKEY", ""),
        timeout=timeout,
        host=env.get("CLOUDTREE_HOST", DEFAULT_HOST),
        port=port,
        log_level=env.get("CLOUDTREE_LOG_LEVEL", "INFO"),
        log_file=env.get("CLOUDTREE_LOG_FILE") or None
    )
