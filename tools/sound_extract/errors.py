"""Exception types raised while extracting sound assets."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class SoundExtractError(Exception):
    """Base class for all sound extraction failures."""


class MissingInputDirectory(SoundExtractError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"source directory not found: {path}")
        self.path = path


class ConfigError(SoundExtractError):
    pass


class AssetError(SoundExtractError):
    """A failure scoped to a single source file.

    The pipeline records these and moves on to the next file.
    """

    kind = "asset_error"

    @property
    def reason(self) -> str:
        return str(self)


class ReadError(AssetError):
    kind = "read_error"


class MissingField(AssetError):
    kind = "missing_field"

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = sorted(fields)
        super().__init__(f"missing field(s): {', '.join(self.fields)}")


class AmbiguousAsset(AssetError):
    kind = "ambiguous_asset"

    def __init__(self, field: str, count: int) -> None:
        super().__init__(f"found {count} '{field}' fields, expected exactly one")
        self.field = field
        self.count = count


class InvalidAssetName(AssetError):
    kind = "invalid_name"


class MalformedDataUri(AssetError):
    kind = "malformed_data_uri"


class DecodeError(AssetError):
    kind = "decode_error"


class WriteError(AssetError):
    kind = "write_error"
