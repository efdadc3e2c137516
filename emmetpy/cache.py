import base64
import fcntl
import logging
import os
import random
import time
from pathlib import Path
from typing import Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

ONE_YEAR = 31536000

_FNV_OFFSET = 0x811c9dc5
_FNV_PRIME = 0x01000193


def fnv1a32(data: bytes) -> int:
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & 0xffffffff
    return h


def cache_key(text: str) -> str:
    """File-name-safe key for an input text."""
    digest = fnv1a32(text.encode('utf-8', 'surrogatepass')).to_bytes(4, 'big')
    return base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')


class FileCache:
    """
    Stores expanded output in files, one file per input.

    A file's mtime is its expiry time: entries whose mtime has passed are misses and
    are removed by the next garbage collection run. Readers take a shared lock,
    writers an exclusive one.
    """

    def __init__(self, directory, dir_level: int = 0, gc_probability: int = 10,
                 file_mode: Optional[int] = None, dir_mode: int = 0o775,
                 extension: str = '.xml', duration: int = ONE_YEAR):
        self.directory = Path(directory)
        if not self.directory.is_dir() or not os.access(self.directory, os.W_OK):
            raise ConfigError(f'Cache directory "{self.directory}" is not writable.')
        self.dir_level = dir_level          # levels of 2-character sub-directories
        self.gc_probability = gc_probability  # parts per million, per store() call
        self.file_mode = file_mode
        self.dir_mode = dir_mode
        self.extension = extension
        self.duration = duration if duration > 0 else ONE_YEAR

    def path_for(self, key: str) -> Path:
        name = cache_key(key)
        base = self.directory
        for i in range(self.dir_level):
            prefix = name[2 * i:2 * i + 2]
            if prefix:
                base = base / prefix
        return base / (name + self.extension)

    def lookup(self, key: str) -> Optional[str]:
        """Returns the cached text for `key`, or None when missing or expired."""
        path = self.path_for(key)
        try:
            if path.stat().st_mtime <= time.time():
                return None
            with open(path, 'r', encoding='utf-8', errors='surrogatepass') as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                try:
                    return f.read()
                finally:
                    fcntl.flock(f, fcntl.LOCK_UN)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.debug("Cache read failed for %s: %s", path, e)
            return None

    def store(self, key: str, value: str) -> bool:
        """Writes `value` for `key`. Returns False instead of raising on failure."""
        self.gc()
        path = self.path_for(key)
        try:
            if self.dir_level > 0:
                path.parent.mkdir(mode=self.dir_mode, parents=True, exist_ok=True)
            with open(path, 'a+', encoding='utf-8', errors='surrogatepass') as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                try:
                    f.seek(0)
                    f.truncate()
                    f.write(value)
                    f.flush()
                finally:
                    fcntl.flock(f, fcntl.LOCK_UN)
            if self.file_mode is not None:
                os.chmod(path, self.file_mode)
            expires = time.time() + self.duration
            os.utime(path, (expires, expires))
        except (OSError, ValueError) as e:
            logger.warning("Cache write failed for %s: %s", path, e)
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            self.path_for(key).unlink()
        except OSError:
            return False
        return True

    def gc(self, force: bool = False, expired_only: bool = True):
        """
        Removes expired cache files, or all of them when `expired_only` is False.
        Unless forced, runs with a probability of `gc_probability` per million calls.
        """
        if force or random.randint(0, 1000000) < self.gc_probability:
            self._gc_recursive(self.directory, expired_only)

    def _gc_recursive(self, path: Path, expired_only: bool) -> bool:
        ok = True
        try:
            entries = list(os.scandir(path))
        except OSError as e:
            logger.warning("Cache gc cannot list %s: %s", path, e)
            return False
        now = time.time()
        for entry in entries:
            if entry.name.startswith('.'):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    ok = self._gc_recursive(Path(entry.path), expired_only) and ok
                    if not expired_only:
                        os.rmdir(entry.path)
                elif not expired_only or entry.stat().st_mtime < now:
                    os.unlink(entry.path)
            except OSError as e:
                logger.debug("Cache gc failed on %s: %s", entry.path, e)
                ok = False
        return ok
