"""Rabin fingerprint (CRC-64-AVRO) used for Avro schema fingerprints."""

from __future__ import annotations

__all__ = ["EMPTY64", "FP_TABLE", "Rabin", "rabin_fingerprint"]

EMPTY64 = 0xC15D213AA4D7A795


def _build_table() -> tuple[int, ...]:
    table = []
    for value in range(256):
        fp = value
        for _ in range(8):
            fp = (fp >> 1) ^ EMPTY64 if fp & 1 else fp >> 1
        table.append(fp)
    return tuple(table)


FP_TABLE: tuple[int, ...] = _build_table()


class Rabin:
    """Incremental Rabin fingerprint; the digest is 8 little-endian bytes."""

    __slots__ = ("_result",)

    def __init__(self) -> None:
        self._result = EMPTY64

    def update(self, data: bytes | bytearray | memoryview | str) -> None:
        """Feed bytes (or a string, encoded as UTF-8) into the fingerprint."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        result = self._result
        for byte in bytes(data):
            result = (result >> 8) ^ FP_TABLE[(result ^ byte) & 0xFF]
        self._result = result

    def digest(self) -> bytes:
        """The current fingerprint as 8 little-endian bytes."""
        return self._result.to_bytes(8, "little")

    def __repr__(self) -> str:
        return f"Rabin(result={self._result:#018X})"


def rabin_fingerprint(data: bytes | bytearray | memoryview | str) -> bytes:
    """Fingerprint ``data`` in one call."""
    hasher = Rabin()
    hasher.update(data)
    return hasher.digest()