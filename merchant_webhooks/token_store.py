"""File-backed access token storage."""
import json
import logging
import threading
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)


class FileAccessTokenStore:
    """Provides access tokens for merchants from a JSON file.

    The file holds a single object mapping merchant id to access token, e.g.
    ``{"BBFF8NBCXEMDT": "16258cd4-..."}``. It is re-read only when its
    modification time changes, so tokens can be edited without a restart.
    """

    def __init__(self, path: Path | str):
        """Initialize the store, creating an empty token file if needed.

        Args:
            path: Location of the token file
        """
        self.path = Path(path)
        self._tokens: dict[str, str] = {}
        self._last_mtime: float | None = None
        self._lock = threading.Lock()

        if not self.path.exists():
            logger.info(f"Creating access token file: {self.path}")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("{}", encoding="utf-8")

    def get_access_token(self, merchant_id: str) -> str | None:
        """Return the stored token for a merchant, or None if there is none."""
        with self._lock:
            self._refresh()
            return self._tokens.get(merchant_id)

    def save_tokens(self, tokens: Mapping[str, str]) -> None:
        """Merge merchant tokens into the file.

        Args:
            tokens: Merchant id to access token
        """
        with self._lock:
            self._refresh()
            merged = {**self._tokens, **tokens}
            self.path.write_text(json.dumps(merged, indent=2), encoding="utf-8")
            self._tokens = merged
            self._last_mtime = self.path.stat().st_mtime
        logger.info(f"Saved access tokens for {len(tokens)} merchant(s)")

    def _refresh(self) -> None:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            logger.error(f"Cannot stat access token file {self.path}: {e}")
            self._tokens = {}
            self._last_mtime = None
            return

        if mtime == self._last_mtime:
            return

        logger.info(f"Reading in file: {self.path.resolve()}")
        self._last_mtime = mtime
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read access token file {self.path}: {e}")
            self._tokens = {}
            return

        if not isinstance(data, dict):
            logger.error(f"Access token file {self.path} does not contain a JSON object")
            self._tokens = {}
            return

        self._tokens = {str(k): str(v) for k, v in data.items() if v}
