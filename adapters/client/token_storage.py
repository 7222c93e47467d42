"""
Token storage - where the client keeps its bearer token.
FileTokenStorage plays the role of the browser's local storage.
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class MemoryTokenStorage:
    """Token kept for the lifetime of the process"""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage:
    """Token persisted as JSON so separate CLI runs share a session"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"[TOKEN] Ignoring unreadable token file {self.path}: {e}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
