"""Plain JSON file storage in the per-user config directory.

Security Model:
- Directory created with mode 0700, files written with mode 0600
- No encryption: the files are protected by permission bits only
- Used when the OS keychain is unavailable, or when the user prefers it

Each credential domain is one JSON document, rewritten in full on every
save. Writes go to a temporary file that is renamed over the target, so a
reader never sees a half-written document. There is no cross-process
locking; concurrent invocations against the same directory are not
supported.
"""

import json
import os
from pathlib import Path
from typing import Any

import structlog

from hetzner_cli.enums import StoreDomain

log = structlog.get_logger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class FileStore:
    """JSON documents for the Robot config and the cloud context registry.

    Example:
        >>> store = FileStore(Path("~/.hetzner-cli").expanduser())
        >>> store.save(StoreDomain.ROBOT, {"user": "alice", "password": "..."})
        >>> store.load(StoreDomain.ROBOT)["user"]
        'alice'
        >>> store.clear(StoreDomain.ROBOT)
    """

    def __init__(self, config_dir: Path) -> None:
        """Initialize file store.

        Args:
            config_dir: Directory holding one file per domain; created lazily
        """
        self.config_dir = config_dir

    def path_for(self, domain: StoreDomain) -> Path:
        """Return the file backing a domain."""
        return self.config_dir / domain.value

    def load(self, domain: StoreDomain) -> dict[str, Any]:
        """Load a domain's document.

        Missing files and unparseable content both count as "no data".

        Args:
            domain: Which document to read

        Returns:
            The parsed JSON object, or an empty dict
        """
        path = self.path_for(domain)
        if not path.exists():
            return {}

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.warning("config_file_unreadable", path=str(path), error=str(e))
            return {}

        if not isinstance(data, dict):
            log.warning("config_file_not_an_object", path=str(path))
            return {}

        return data

    def save(self, domain: StoreDomain, document: dict[str, Any]) -> None:
        """Atomically write a domain's document with owner-only permissions.

        Args:
            domain: Which document to write
            document: JSON-serializable object

        Raises:
            OSError: If the directory or file cannot be written
        """
        self._ensure_config_dir()

        path = self.path_for(domain)
        temp_path = path.with_name(f".{path.name}.tmp")

        # Create with restrictive permissions instead of tightening afterwards
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.chmod(temp_path, FILE_MODE)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        log.debug("config_file_saved", path=str(path))

    def clear(self, domain: StoreDomain) -> None:
        """Overwrite a domain's document with ``{}``; no-op if it does not exist."""
        if self.path_for(domain).exists():
            self.save(domain, {})
            log.info("config_file_cleared", domain=str(domain))

    def _ensure_config_dir(self) -> None:
        if self.config_dir.exists():
            return
        self.config_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        # mkdir honours the umask; enforce owner-only access explicitly
        os.chmod(self.config_dir, DIR_MODE)
        log.debug("config_dir_created", path=str(self.config_dir))
