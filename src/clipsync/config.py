import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(env_path: Optional[Path] = None) -> None:
    if env_path is not None and env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _default_data_dir() -> Path:
    return Path.home() / ".clipsync"


@dataclass(frozen=True)
class AppConfig:
    storage: str = "file"
    data_dir: Path = field(default_factory=_default_data_dir)
    api_enabled: bool = True
    api_host: str = "127.0.0.1"
    api_port: int = 8765
    watch_clipboard: bool = True
    shortcut: str = "Ctrl+Shift+C"

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "AppConfig":
        load_env(env_path)

        data_dir_raw = os.getenv("CLIPSYNC_DATA_DIR")
        port_raw = os.getenv("CLIPSYNC_API_PORT")

        return cls(
            storage=os.getenv("CLIPSYNC_STORAGE", cls.storage),
            data_dir=Path(data_dir_raw).expanduser() if data_dir_raw else _default_data_dir(),
            api_enabled=_to_bool(os.getenv("CLIPSYNC_API"), default=True),
            api_host=os.getenv("CLIPSYNC_API_HOST", cls.api_host),
            api_port=int(port_raw) if port_raw else cls.api_port,
            watch_clipboard=_to_bool(os.getenv("CLIPSYNC_WATCH_CLIPBOARD"), default=True),
            shortcut=os.getenv("CLIPSYNC_SHORTCUT", cls.shortcut),
        )
