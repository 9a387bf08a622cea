import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

CONFIG_DIR = Path.home() / ".config" / "clipshot"


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _to_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if not raw:
        return default
    return Path(raw).expanduser()


def load_env_file(env_path: Optional[Path] = None) -> None:
    path = env_path or CONFIG_DIR / ".env"
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)
    else:
        load_dotenv(override=False)


@dataclass(frozen=True)
class ClipshotConfig:
    poll_interval: float = 0.2
    log_dir: Path = CONFIG_DIR / "logs"
    log_max_age: float = 60 * 60
    local_dir: Path = Path.home() / "clipshot-screenshots"
    remote_dir: str = "clipshot-screenshots"
    screenshot_dir: Optional[Path] = None
    debounce: float = 0.3
    read_timeout: float = 5.0
    write_timeout: float = 2.0
    transfer_timeout: float = 5.0
    ssh_command: str = "ssh"
    ssh_multiplex: bool = True
    background: bool = False

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "ClipshotConfig":
        load_env_file(env_path)

        background = _to_bool(os.getenv("CLIPSHOT_BACKGROUND"), default=False) or \
            _to_bool(os.getenv("SHOTMON_BACKGROUND"), default=False)

        return cls(
            poll_interval=_to_float("CLIPSHOT_POLL_INTERVAL", cls.poll_interval),
            log_dir=_to_path("CLIPSHOT_LOG_DIR", cls.log_dir),
            log_max_age=_to_float("CLIPSHOT_LOG_MAX_AGE", cls.log_max_age),
            local_dir=_to_path("CLIPSHOT_LOCAL_DIR", cls.local_dir),
            remote_dir=os.getenv("CLIPSHOT_REMOTE_DIR") or cls.remote_dir,
            screenshot_dir=_to_path("CLIPSHOT_SCREENSHOT_DIR", None),
            debounce=_to_float("CLIPSHOT_DEBOUNCE", cls.debounce),
            read_timeout=_to_float("CLIPSHOT_READ_TIMEOUT", cls.read_timeout),
            write_timeout=_to_float("CLIPSHOT_WRITE_TIMEOUT", cls.write_timeout),
            transfer_timeout=_to_float(
                "CLIPSHOT_TRANSFER_TIMEOUT", cls.transfer_timeout),
            ssh_command=os.getenv("CLIPSHOT_SSH") or cls.ssh_command,
            ssh_multiplex=_to_bool(os.getenv("CLIPSHOT_SSH_MULTIPLEX"), default=True),
            background=background,
        )
