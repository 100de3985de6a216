from typing import Protocol, runtime_checkable


@runtime_checkable
class ChecksumFilePort(Protocol):
    def read_text(self, location: str) -> str:
        """
        Read a whole checksum file as text.

        Raises:
            ChecksumFileError: If the file is missing, unreadable or not UTF-8
        """
        ...

    def write_text(self, location: str, text: str) -> None:
        """
        Write a whole checksum file.

        Raises:
            ChecksumFileError: If the file cannot be written
        """
        ...
