import os
from pathlib import Path
from typing import Optional


def _project_env_path() -> Path:
    explicit = os.getenv("POLYPUFF_ENV_FILE")
    if explicit:
        return Path(explicit)
    return Path(__file__).resolve().parents[2] / ".env"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def load_project_env(path: Optional[Path] = None, override: bool = False) -> list[str]:
    """Populate os.environ from the project .env file.

    Existing variables win unless ``override`` is set. Returns the keys that
    were written.
    """
    env_path = path or _project_env_path()
    if not env_path.exists():
        return []

    written: list[str] = []
    for raw_line in env_path.read_text(encoding="utf-8-sig").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        if override or key not in os.environ:
            os.environ[key] = _strip_quotes(value.strip())
            written.append(key)
    return written
