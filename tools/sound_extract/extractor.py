"""Pattern-based extraction of sound asset definitions from source text.

Source files are never executed or parsed; the extractor looks for a quoted
string literal assigned to a ``name`` key and to a ``dataUri`` key, e.g.::

    export const tick: SoundAsset = {
      name: "tick",
      dataUri: "data:audio/mpeg;base64,SUQzBAA...",
      duration: 0.12,
    };

Keys may be quoted (JSON style) and assigned with ``:`` or ``=``. A key only
matches as a whole identifier, so ``filename: "x"`` does not count as a name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tools.sound_extract.errors import AmbiguousAsset, InvalidAssetName, MissingField

NAME_KEY = "name"
DATA_URI_KEY = "dataUri"
METADATA_KEYS = ("format", "license", "author")

_STRING_VALUE = r"""(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|`(?P<bq>[^`]*)`)"""
_NUMBER_VALUE = r"(?P<num>[0-9]+(?:\.[0-9]+)?)"


def _key_pattern(key: str, value: str) -> re.Pattern[str]:
    return re.compile(
        r"(?<![\w$])(?P<quote>[\"']?)" + re.escape(key) + r"(?P=quote)\s*[:=]\s*" + value
    )


_STRING_PATTERNS = {
    key: _key_pattern(key, _STRING_VALUE) for key in (NAME_KEY, DATA_URI_KEY, *METADATA_KEYS)
}
_DURATION_PATTERN = _key_pattern("duration", _NUMBER_VALUE)


@dataclass(frozen=True)
class SoundAsset:
    name: str
    data_uri: str
    duration: Optional[float] = None
    format: Optional[str] = None
    license: Optional[str] = None
    author: Optional[str] = None


@dataclass
class FieldMatches:
    """Every literal found for the asset keys of one source file."""

    names: List[str] = field(default_factory=list)
    data_uris: List[str] = field(default_factory=list)
    metadata: Dict[str, object] = field(default_factory=dict)

    def to_asset(self, first_match: bool = False) -> SoundAsset:
        missing = []
        if not self.names:
            missing.append(NAME_KEY)
        if not self.data_uris:
            missing.append(DATA_URI_KEY)
        if missing:
            raise MissingField(missing)

        if not first_match:
            if len(self.names) > 1:
                raise AmbiguousAsset(NAME_KEY, len(self.names))
            if len(self.data_uris) > 1:
                raise AmbiguousAsset(DATA_URI_KEY, len(self.data_uris))

        name = validate_asset_name(self.names[0])
        return SoundAsset(name=name, data_uri=self.data_uris[0], **self.metadata)


def _string_values(pattern: re.Pattern[str], content: str) -> List[str]:
    values = []
    for match in pattern.finditer(content):
        for group in ("dq", "sq", "bq"):
            value = match.group(group)
            if value is not None:
                values.append(value)
                break
    return values


def scan_fields(content: str) -> FieldMatches:
    matches = FieldMatches(
        names=_string_values(_STRING_PATTERNS[NAME_KEY], content),
        data_uris=_string_values(_STRING_PATTERNS[DATA_URI_KEY], content),
    )
    for key in METADATA_KEYS:
        values = _string_values(_STRING_PATTERNS[key], content)
        if values:
            matches.metadata[key] = values[0]
    duration = _DURATION_PATTERN.search(content)
    if duration:
        matches.metadata["duration"] = float(duration.group("num"))
    return matches


def validate_asset_name(name: str) -> str:
    """Return ``name`` stripped, or raise if it is not a single path segment."""

    cleaned = name.strip()
    if not cleaned:
        raise InvalidAssetName("asset name is empty")
    if cleaned in {".", ".."}:
        raise InvalidAssetName(f"asset name {cleaned!r} is not a file name")
    if any(ch in cleaned for ch in ("/", "\\", "\x00")):
        raise InvalidAssetName(f"asset name {cleaned!r} contains a path separator")
    return cleaned


def extract_sound_asset(content: str, first_match: bool = False) -> Optional[SoundAsset]:
    """Return the sound asset defined in ``content`` or ``None`` if there is none.

    Absence of either field is expected for files that do not define a sound
    and is not an error. Ambiguous or unsafe definitions still raise.
    """

    try:
        return scan_fields(content).to_asset(first_match=first_match)
    except MissingField:
        return None
