"""Extract embedded base64 sound assets from source files."""

from .datauri import decode_data_uri, media_type, split_data_uri
from .errors import (
    AmbiguousAsset,
    AssetError,
    ConfigError,
    DecodeError,
    InvalidAssetName,
    MalformedDataUri,
    MissingField,
    MissingInputDirectory,
    ReadError,
    SoundExtractError,
    WriteError,
)
from .extractor import FieldMatches, SoundAsset, extract_sound_asset, scan_fields
from .pipeline import ExtractionResult, ExtractionSummary, run_pipeline
from .walker import iter_source_files

__all__ = [
    "AmbiguousAsset",
    "AssetError",
    "ConfigError",
    "DecodeError",
    "ExtractionResult",
    "ExtractionSummary",
    "FieldMatches",
    "InvalidAssetName",
    "MalformedDataUri",
    "MissingField",
    "MissingInputDirectory",
    "ReadError",
    "SoundAsset",
    "SoundExtractError",
    "WriteError",
    "decode_data_uri",
    "extract_sound_asset",
    "iter_source_files",
    "media_type",
    "run_pipeline",
    "scan_fields",
    "split_data_uri",
]
