"""Persisted suburb dataset."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from property_finder.common.errors import DatasetError
from property_finder.common.fs import read_json, write_json_atomic


@dataclass
class SuburbDataset:
    path: Path
    payload: dict

    @property
    def suburbs(self) -> dict[str, dict]:
        return self.payload["suburbs"]

    @property
    def metadata(self) -> dict:
        return self.payload.setdefault("metadata", {})

    def save(self) -> None:
        write_json_atomic(self.path, self.payload)


def load_dataset(path: Path) -> SuburbDataset:
    try:
        payload = read_json(path)
    except FileNotFoundError as exc:
        raise DatasetError(f"Suburb dataset not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise DatasetError(f"Could not read suburb dataset {path}: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("suburbs"), dict):
        raise DatasetError(f"Suburb dataset has no 'suburbs' mapping: {path}")
    if not isinstance(payload.get("metadata", {}), dict):
        raise DatasetError(f"Suburb dataset metadata must be a mapping: {path}")
    return SuburbDataset(path=path, payload=payload)
