"""Checksum file adapter for reading and atomically writing checksum files."""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path

from ...domain.errors import ChecksumFileError

logger = logging.getLogger(__name__)

STDIO = "-"


class ChecksumFileAdapter:
    """ChecksumFilePort on the local filesystem; ``-`` means stdin/stdout."""

    def read_text(self, location: str) -> str:
        """
        Read a checksum file as UTF-8 text.

        Raises:
            ChecksumFileError: If the file is missing, unreadable or not UTF-8
        """
        if location == STDIO:
            try:
                return sys.stdin.read()
            except (OSError, UnicodeDecodeError) as e:
                raise ChecksumFileError("<stdin>", str(e)) from e

        path = Path(location)
        if not path.exists():
            raise ChecksumFileError(location, "file does not exist")
        if not path.is_file():
            raise ChecksumFileError(location, "not a regular file")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ChecksumFileError(location, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
        except OSError as e:
            raise ChecksumFileError(location, e.strerror or str(e)) from e

        logger.debug(f"Checksum file loaded: {location}", extra={"bytes": len(text)})
        return text

    def write_text(self, location: str, text: str) -> None:
        """
        Write a checksum file atomically (write to temp file, then rename).

        Raises:
            ChecksumFileError: If the write fails
        """
        if location == STDIO:
            sys.stdout.write(text)
            sys.stdout.flush()
            return

        path = Path(location)
        temp_path: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="\n",
                dir=path.parent,
                prefix=f".{path.name}.tmp.",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(text)
                temp_file.flush()
                os.fsync(temp_file.fileno())

            shutil.move(str(temp_path), str(path))
        except OSError as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            raise ChecksumFileError(location, e.strerror or str(e)) from e

        logger.debug(f"Checksum file saved: {location}", extra={"bytes": len(text)})
