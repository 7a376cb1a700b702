"""Lock database that keeps track of installed packages."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

_MASK = 0xFFFFFFFFFFFFFFFF


class LockDbError(Exception):
    """The lock database could not be read, decoded or written."""


def _now() -> int:
    return int(time.time() * 1000)


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK


def _sip_round(v0: int, v1: int, v2: int, v3: int) -> tuple[int, int, int, int]:
    v0 = (v0 + v1) & _MASK
    v1 = _rotl(v1, 13) ^ v0
    v0 = _rotl(v0, 32)
    v2 = (v2 + v3) & _MASK
    v3 = _rotl(v3, 16) ^ v2
    v0 = (v0 + v3) & _MASK
    v3 = _rotl(v3, 21) ^ v0
    v2 = (v2 + v1) & _MASK
    v1 = _rotl(v1, 17) ^ v2
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


def _siphash13(data: bytes) -> int:
    """SipHash-1-3 with an all-zero key."""
    v0 = 0x736F6D6570736575
    v1 = 0x646F72616E646F6D
    v2 = 0x6C7967656E657261
    v3 = 0x7465646279746573
    tail_len = len(data) % 8
    body = data[: len(data) - tail_len]
    for start in range(0, len(body), 8):
        m = int.from_bytes(body[start : start + 8], "little")
        v3 ^= m
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0 ^= m
    last = ((len(data) & 0xFF) << 56) | int.from_bytes(data[len(body) :], "little")
    v3 ^= last
    v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    v0 ^= last
    v2 ^= 0xFF
    for _ in range(3):
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    return v0 ^ v1 ^ v2 ^ v3


def _hash_str(value: str) -> int:
    return _siphash13(value.encode("utf-8") + b"\xff")


@dataclass(frozen=True)
class PackageRecord:
    url: str
    version: str


def package_id(record: PackageRecord) -> str:
    """Identifier of a package, derived from hashes of its URL and version."""
    return f"{_hash_str(record.url):#x}-{_hash_str(record.version):#x}"


@dataclass
class LockDb:
    """In-memory copy of the lock database bound to a file."""

    DB_PATH: ClassVar[str] = "titan.lock"
    DB_VERSION: ClassVar[int] = 1

    path: Path
    version: int = 1
    created_on: int = field(default_factory=_now)
    last_modified: int = field(default_factory=_now)
    entries: dict[str, PackageRecord] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path | None = None) -> LockDb:
        """Read the database, creating and saving an empty one if it is missing."""
        path = Path(path if path is not None else cls.DB_PATH)
        if not path.exists():
            db = cls(path, version=cls.DB_VERSION)
            db.save()
            return db
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as err:
            raise LockDbError(f"Failed to perform I/O on the database: {err}") from err
        try:
            data = json.loads(raw)
            entries = {
                key: PackageRecord(str(value["url"]), str(value["version"]))
                for key, value in data["entries"].items()
            }
            return cls(
                path,
                version=int(data["version"]),
                created_on=int(data["created_on"]),
                last_modified=int(data["last_modified"]),
                entries=entries,
            )
        except (ValueError, KeyError, TypeError, AttributeError) as err:
            raise LockDbError(f"The database file seems corrupted: {err}") from err

    def save(self) -> None:
        """Write the database to disk."""
        self.last_modified = _now()
        data = {
            "version": self.version,
            "last_modified": self.last_modified,
            "created_on": self.created_on,
            "entries": {
                key: {"url": record.url, "version": record.version}
                for key, record in self.entries.items()
            },
        }
        try:
            raw = json.dumps(data, indent=4)
        except (TypeError, ValueError) as err:
            raise LockDbError(f"Could not encode the database: {err}") from err
        try:
            self.path.write_text(raw, encoding="utf-8")
        except OSError as err:
            raise LockDbError(f"Failed to perform I/O on the database: {err}") from err

    def store(self, record: PackageRecord) -> str:
        """Record a package in memory only and return its identifier."""
        key = package_id(record)
        self.entries[key] = record
        return key

    def get_package(self, package_id: str) -> PackageRecord | None:
        return self.entries.get(package_id)

    def contains(self, record: PackageRecord) -> bool:
        return package_id(record) in self.entries