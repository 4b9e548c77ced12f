"""Default download, verify, install and restart primitives.

All methods are synchronous (blocking) and raise the UpdateError family on
failure, so the orchestrator can treat every package the same way.
"""

import hashlib
import logging
import os
import shutil
import subprocess
import sys
import time
import zipfile
from urllib.error import URLError
from urllib.request import Request, urlopen

import psutil

from autoupdater.branding import AppBranding
from autoupdater.core.errors import ChecksumMismatchError, DownloadError, InstallError
from autoupdater.core.models import ModMetadata, UpdateCandidate

logger = logging.getLogger(__name__)

# Buffer size for streaming downloads (80 KB)
DOWNLOAD_BUFFER = 81920

# Read size when hashing downloaded archives (1 MB)
HASH_CHUNK = 1024 * 1024


class PackagePrimitives:
    """Filesystem and network operations for one package at a time."""

    def __init__(self, mods_dir: str, timeout: float = 120,
                 clock=time.monotonic):
        self.mods_dir = mods_dir
        self.timeout = timeout
        self._clock = clock

    # ── Download ─────────────────────────────────────────────────────

    def download(self, url: str, dest_path: str, on_progress=None):
        """Stream url to dest_path, reporting (position, total, speed KiB/s)."""
        req = Request(url, headers={
            'User-Agent': AppBranding.user_agent(),
        })

        dest_dir = os.path.dirname(dest_path)
        if dest_dir:
            os.makedirs(dest_dir, exist_ok=True)

        try:
            with urlopen(req, timeout=self.timeout) as resp:
                total = int(resp.headers.get('Content-Length') or 0)
                position = 0
                started = self._clock()
                with open(dest_path, 'wb') as f:
                    while True:
                        chunk = resp.read(DOWNLOAD_BUFFER)
                        if not chunk:
                            break
                        f.write(chunk)
                        position += len(chunk)
                        if on_progress:
                            on_progress(position, total, self._speed(position, started))
        except (URLError, OSError, ValueError) as e:
            raise DownloadError(f"Download of {url} failed: {e}") from e

        logger.info("Downloaded %s (%d bytes)", url, position)

    def _speed(self, position: int, started: float) -> int:
        elapsed = self._clock() - started
        if elapsed <= 0:
            return 0
        return int(position / 1024 / elapsed)

    # ── Verify ───────────────────────────────────────────────────────

    def verify_checksum(self, candidate: UpdateCandidate, file_path: str):
        """Check the archive against every accepted SHA-256 digest."""
        try:
            actual = file_sha256(file_path)
        except OSError as e:
            raise ChecksumMismatchError(candidate.name, "", candidate.checksums) from e

        expected = tuple(c.lower() for c in candidate.checksums)
        if actual not in expected:
            raise ChecksumMismatchError(candidate.name, actual, candidate.checksums)
        logger.info("Checksum verified for %s: %s...", candidate.name, actual[:16])

    # ── Install ──────────────────────────────────────────────────────

    def install(self, candidate: UpdateCandidate, metadata: ModMetadata, file_path: str):
        """Replace the installed archive with the downloaded one.

        The old archive is deleted before the new one is moved in, so a
        failure in between leaves the package missing until the next run.
        """
        if not zipfile.is_zipfile(file_path):
            raise InstallError(f"Invalid update package for {candidate.name}: not a ZIP file")

        target = metadata.path or os.path.join(self.mods_dir, f"{candidate.name}.zip")

        try:
            os.makedirs(os.path.dirname(target) or '.', exist_ok=True)
            if os.path.exists(target):
                logger.info("Deleting mod archive: %s", target)
                os.remove(target)
            logger.info("Moving %s to %s", file_path, target)
            shutil.move(file_path, target)
        except OSError as e:
            raise InstallError(f"Failed to install {candidate.name}: {e}") from e

    # ── Cleanup ──────────────────────────────────────────────────────

    def try_delete(self, path: str):
        """Delete a leftover file. A missing file is not an error."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete %s: %s", path, e)


def file_sha256(path: str) -> str:
    hasher = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK), b""):
            hasher.update(chunk)
    return hasher.hexdigest().lower()


# ── Restart ──────────────────────────────────────────────────────────

def restart_command() -> list[str]:
    """Command line that started this process."""
    try:
        cmdline = psutil.Process(os.getpid()).cmdline()
    except psutil.Error as e:
        logger.warning("Cannot read own command line: %s", e)
        cmdline = []
    return cmdline or [sys.executable, *sys.argv]


def restart_process():
    """Launch a fresh copy of this process and exit. Does not return."""
    cmd = restart_command()
    logger.info("Restarting: %s", cmd)

    # Launch detached so it survives parent exit
    if sys.platform == 'win32':
        subprocess.Popen(
            cmd,
            creationflags=(
                subprocess.DETACHED_PROCESS
                | subprocess.CREATE_NEW_PROCESS_GROUP
            ),
        )
    else:
        subprocess.Popen(cmd, start_new_session=True)

    logging.shutdown()
    os._exit(0)
