"""Balance caching for balanceline.

Two tiers:

- a memo dict living on the CacheStore instance, so callers sharing one
  store within a single invocation never query the relay twice;
- one JSON record per account on disk, the last known good balance used
  when the relay cannot be reached.

Several shells may draw their prompts at once and share the on-disk
records. Writes go to a unique temp file that is renamed over the record,
so a reader sees either the previous record or the new one, never a torn
write. The last writer wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from pathlib import Path

import msgspec

from balanceline.config.paths import balances_dir
from balanceline.models import BalanceData
from balanceline.models import CacheEntry

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
_TEMP_PREFIX = ".tmp-"

_decoder = msgspec.json.Decoder(CacheEntry)


class CacheStore:
    """In-process memo plus durable per-account records."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory
        self._memo: dict[str, BalanceData] = {}
        self._memo_captured_at: dict[str, datetime] = {}

    @property
    def directory(self) -> Path:
        """Directory holding durable records."""
        return self._directory or balances_dir()

    def entry_path(self, key: str) -> Path:
        """Get path for an account's durable record."""
        return self.directory / f"{key}{RECORD_SUFFIX}"

    # Memo

    def get_memo(self, key: str) -> BalanceData | None:
        """Return a balance memoized by this store, if any."""
        return self._memo.get(key)

    def memo_age(self, key: str) -> timedelta | None:
        """Age of a memoized balance that was read back from disk.

        None for balances memoized straight from the relay.
        """
        captured_at = self._memo_captured_at.get(key)
        return _age(captured_at) if captured_at is not None else None

    def set_memo(
        self,
        key: str,
        data: BalanceData,
        captured_at: datetime | None = None,
    ) -> None:
        """Memoize a balance, replacing any previous value.

        Pass captured_at when the balance was read back from disk so later
        hits still report it as stale.
        """
        self._memo[key] = data
        if captured_at is None:
            self._memo_captured_at.pop(key, None)
        else:
            self._memo_captured_at[key] = captured_at

    # Durable

    def read_entry(self, key: str) -> CacheEntry | None:
        """Load the durable record for key, None when absent or corrupt."""
        path = self.entry_path(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug("Cannot read cached balance %s: %s", path, e)
            return None

        try:
            entry = _decoder.decode(raw)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            logger.debug("Ignoring corrupt cached balance %s: %s", path, e)
            return None

        if entry.key != key:
            logger.debug("Ignoring cached balance %s stored under another key", path)
            return None
        return entry

    def read_durable(self, key: str) -> tuple[BalanceData | None, timedelta | None]:
        """Read the persisted balance for key and its age.

        Returns (None, None) when there is no usable record.
        """
        entry = self.read_entry(key)
        if entry is None:
            return None, None
        return entry.balance, _age(entry.captured_at)

    def write_durable(self, key: str, data: BalanceData) -> bool:
        """Persist a balance atomically.

        Failures are logged and reported as False; they never raise.
        """
        entry = CacheEntry(
            key=key,
            balance=data,
            captured_at=datetime.now(timezone.utc),
        )
        path = self.entry_path(key)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, msgspec.json.encode(entry))
        except OSError as e:
            logger.warning("Could not cache balance to %s: %s", path, e)
            return False
        return True

    # Maintenance

    def list_entries(self) -> list[CacheEntry]:
        """Return all readable durable records, newest first."""
        directory = self.directory
        if not directory.is_dir():
            return []

        entries = []
        for path in directory.glob(f"*{RECORD_SUFFIX}"):
            if path.name.startswith(_TEMP_PREFIX):
                continue
            entry = self.read_entry(path.stem)
            if entry is not None:
                entries.append(entry)
        return sorted(entries, key=lambda e: e.captured_at, reverse=True)

    def clear(self, key: str | None = None) -> int:
        """Remove one account's record, or every record when key is None.

        Returns:
            Number of files removed
        """
        if key is not None:
            self._memo.pop(key, None)
            self._memo_captured_at.pop(key, None)
            path = self.entry_path(key)
            if path.exists():
                path.unlink(missing_ok=True)
                return 1
            return 0

        self._memo.clear()
        self._memo_captured_at.clear()
        directory = self.directory
        if not directory.is_dir():
            return 0

        removed = 0
        for path in directory.iterdir():
            if path.is_file():
                path.unlink(missing_ok=True)
                removed += 1
        return removed


def _atomic_write(path: Path, content: bytes) -> None:
    """Write content to path via a unique temp file and an atomic rename."""
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=_TEMP_PREFIX, suffix=RECORD_SUFFIX
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def _age(captured_at: datetime) -> timedelta:
    """Age of a record, treating naive timestamps as UTC."""
    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=timezone.utc)
    return max(timedelta(0), datetime.now(timezone.utc) - captured_at)
