"""A directory-backed cache of experiments, keyed by name and version."""

from __future__ import annotations

import hashlib
import json
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .experiment import Experiment

CACHE_EXT = ".gmeasure-cache"


@dataclass(frozen=True)
class CachedExperimentHeader:
    """The name and version under which an experiment was cached."""

    name: str = ""
    version: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"Name": self.name, "Version": self.version}

    @classmethod
    def from_dict(cls, data: object) -> CachedExperimentHeader:
        if not isinstance(data, dict):
            raise ValueError(f"cannot decode {data!r} as a cache header")
        return cls(name=data.get("Name", ""), version=int(data.get("Version", 0)))


def _extension(filename: str) -> str:
    dot = filename.rfind(".")
    return filename[dot:] if dot >= 0 else ""


def _json_values(text: str) -> Iterator[Any]:
    """Yield the JSON values written one after another in text."""
    decoder = json.JSONDecoder()
    position = 0
    while True:
        while position < len(text) and text[position].isspace():
            position += 1
        if position >= len(text):
            return
        value, position = decoder.raw_decode(text, position)
        yield value


@dataclass(frozen=True)
class ExperimentCache:
    """Caches experiments as files in a directory.

    Each file is named after a hash of the experiment's name and holds two JSON
    documents: a CachedExperimentHeader and then the experiment itself.
    The directory is created if it does not exist.
    """

    path: str

    def __post_init__(self) -> None:
        target = Path(self.path)
        if not target.exists():
            target.mkdir(parents=True, exist_ok=True)
        elif not target.is_dir():
            raise NotADirectoryError(f"{self.path} is not a directory")

    def _file_for(self, name: str) -> Path:
        digest = hashlib.md5(name.encode("utf-8")).hexdigest()
        return Path(self.path) / (digest + CACHE_EXT)

    def _cache_files(self) -> list[Path]:
        return [
            Path(self.path) / entry
            for entry in sorted(os.listdir(self.path))
            if _extension(entry) == CACHE_EXT
        ]

    @staticmethod
    def _read_header(file: Path) -> CachedExperimentHeader:
        text = file.read_text(encoding="utf-8")
        first = next(_json_values(text), None)
        if first is None:
            raise ValueError(f"{file} holds no cache header")
        return CachedExperimentHeader.from_dict(first)

    def list(self) -> list[CachedExperimentHeader]:
        """Return the headers of all experiments in the cache."""
        return [self._read_header(file) for file in self._cache_files()]

    def clear(self) -> None:
        """Delete every cache file in the cache directory."""
        for file in self._cache_files():
            file.unlink()

    def load(self, name: str, version: int) -> Experiment | None:
        """Return the cached experiment if it exists with at least this version, else None."""
        try:
            text = self._file_for(name).read_text(encoding="utf-8")
        except OSError:
            return None
        try:
            documents = _json_values(text)
            header = CachedExperimentHeader.from_dict(next(documents))
            if header.version < version:
                return None
            data = next(documents)
            if not isinstance(data, dict):
                return None
            return Experiment.from_dict(data)
        except (ValueError, TypeError, AttributeError, StopIteration):
            return None

    def save(self, name: str, version: int, experiment: Experiment) -> None:
        """Store the experiment under the given name and version."""
        header = CachedExperimentHeader(name=name, version=version)
        with open(self._file_for(name), "w", encoding="utf-8") as f:
            f.write(json.dumps(header.to_dict()) + "\n")
            f.write(json.dumps(experiment.to_dict()) + "\n")

    def delete(self, name: str) -> None:
        """Remove the named experiment from the cache."""
        os.remove(self._file_for(name))