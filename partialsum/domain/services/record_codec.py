"""Domain service for the line-oriented checksum file format.

One record per line, tab separated::

    <path>\t<size>\t<digest-hex>[\t<mtime>]

Lines starting with ``#`` are comments and blank lines are ignored. The
mtime column is present exactly when the file was generated with modtime
inclusion; a file never mixes both shapes.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..errors import MalformedRecord, MixedRecordFormat
from ..models.checksum_config import ChecksumConfig
from ..models.fingerprint import FileFingerprint
from ..models.record_set import ChecksumRecordSet

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"
COMMENT_PREFIX = "#"

_HEX_RE = re.compile(r"[0-9a-f]+")
_FORBIDDEN_PATH_CHARS = ("\t", "\n", "\r")
_U64_MAX = 2**64 - 1


def _parse_unsigned(value: str, field: str, line: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecord(f"{field} must be a non-negative decimal integer, got {value!r}", line)
    number = int(value)
    if number > _U64_MAX:
        raise MalformedRecord(f"{field} does not fit in 64 bits: {value}", line)
    return number


class RecordCodec:
    """
    Encode and decode checksum records.

    Attributes:
        algorithm: Hash algorithm the digests were produced with
        include_mtime: Expected mtime column; None detects it from the first record
        strict: Abort decode_all on the first bad line instead of skipping it
    """

    def __init__(
        self,
        algorithm: str = "sha256",
        include_mtime: bool | None = None,
        strict: bool = True,
    ) -> None:
        self.algorithm = algorithm
        self.include_mtime = include_mtime
        self.strict = strict
        self.digest_size = ChecksumConfig(algorithm=algorithm).digest_size

    def encode(self, fingerprint: FileFingerprint) -> str:
        """
        Encode one fingerprint as a line (without the trailing newline).

        Raises:
            MalformedRecord: If the path cannot be represented or the digest
                length does not fit the algorithm
        """
        path = fingerprint.path
        for char in _FORBIDDEN_PATH_CHARS:
            if char in path:
                raise MalformedRecord(f"path contains {char!r} and cannot be recorded", path)
        if path.startswith(COMMENT_PREFIX):
            raise MalformedRecord(f"path starts with {COMMENT_PREFIX!r} and would read as a comment", path)
        try:
            path.encode("utf-8")
        except UnicodeEncodeError as e:
            raise MalformedRecord(f"path is not valid UTF-8: {e}", path.encode("utf-8", "replace").decode())
        if len(fingerprint.digest) != self.digest_size:
            raise MalformedRecord(
                f"digest is {len(fingerprint.digest)} bytes, {self.algorithm} produces {self.digest_size}",
                path,
            )
        if self.include_mtime is not None and fingerprint.has_mtime != self.include_mtime:
            raise MixedRecordFormat(
                f"fingerprint {'has' if fingerprint.has_mtime else 'lacks'} an mtime "
                f"but the codec expects {'one' if self.include_mtime else 'none'}",
                path,
            )

        fields = [path, str(fingerprint.size), fingerprint.hexdigest]
        if fingerprint.has_mtime:
            fields.append(str(fingerprint.mtime))
        return FIELD_SEPARATOR.join(fields)

    def encode_all(self, fingerprints: Iterable[FileFingerprint]) -> str:
        """Encode fingerprints as checksum file text, one line each."""
        return "".join(f"{self.encode(fp)}\n" for fp in fingerprints)

    def decode(self, line: str) -> FileFingerprint:
        """
        Decode one record line.

        Raises:
            MalformedRecord: If the line is not a valid record for this codec
        """
        return self._decode(line, self.include_mtime)

    def _decode(self, line: str, include_mtime: bool | None) -> FileFingerprint:
        line = line.rstrip("\r\n")
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) not in (3, 4):
            raise MalformedRecord(f"expected 3 or 4 tab-separated fields, found {len(fields)}", line)

        has_mtime = len(fields) == 4
        if include_mtime is not None and has_mtime != include_mtime:
            if include_mtime:
                reason = "record has no mtime column but modtime inclusion is enabled"
            else:
                reason = "record has an mtime column but modtime inclusion is disabled (try --include-modtime)"
            raise MixedRecordFormat(reason, line)

        path, size_text, digest_text = fields[:3]
        if not path:
            raise MalformedRecord("path is empty", line)
        size = _parse_unsigned(size_text, "size", line)

        if not _HEX_RE.fullmatch(digest_text):
            raise MalformedRecord(f"digest is not lowercase hexadecimal: {digest_text!r}", line)
        if len(digest_text) != 2 * self.digest_size:
            raise MalformedRecord(
                f"digest has {len(digest_text)} hex digits, {self.algorithm} needs {2 * self.digest_size}",
                line,
            )

        mtime = _parse_unsigned(fields[3], "mtime", line) if has_mtime else None
        return FileFingerprint(
            path=path,
            size=size,
            digest=bytes.fromhex(digest_text),
            mtime=mtime,
        )

    def decode_all(self, text: str) -> ChecksumRecordSet:
        """
        Decode a whole checksum file.

        In strict mode the first bad line raises; in lenient mode bad lines
        are skipped and reported in ``ChecksumRecordSet.warnings``.

        Raises:
            MalformedRecord: On a bad line in strict mode
        """
        include_mtime = self.include_mtime
        fingerprints: list[FileFingerprint] = []
        warnings: list[str] = []

        for line_number, raw in enumerate(text.split("\n"), start=1):
            line = raw.rstrip("\r")
            if not line.strip() or line.startswith(COMMENT_PREFIX):
                continue
            try:
                fp = self._decode(line, include_mtime)
            except MalformedRecord as e:
                if self.strict:
                    raise type(e)(e.reason, line, line_number) from e
                msg = f"Skipping line {line_number}: {e.reason}"
                warnings.append(msg)
                logger.warning(msg, extra={"line_number": line_number})
                continue
            if include_mtime is None:
                include_mtime = fp.has_mtime
            fingerprints.append(fp)

        return ChecksumRecordSet(fingerprints, warnings=warnings)
