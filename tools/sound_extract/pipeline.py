"""Walk source files, extract their sound assets and write the decoded audio."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from tools.sound_extract.datauri import decode_data_uri, media_type, split_data_uri
from tools.sound_extract.errors import AssetError, ReadError, WriteError
from tools.sound_extract.extractor import SoundAsset, scan_fields
from tools.sound_extract.walker import DEFAULT_SUFFIXES, ensure_source_dir, iter_source_files

DEFAULT_OUTPUT_SUFFIX = ".mp3"

STATUS_OK = "ok"
STATUS_FAILED = "failed"


@dataclass
class ExtractionResult:
    source: Path
    relative_path: str
    status: str
    asset_name: Optional[str] = None
    media_type: Optional[str] = None
    output_path: Optional[Path] = None
    bytes_written: int = 0
    error_kind: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["source"] = self.source.as_posix()
        data["output_path"] = self.output_path.as_posix() if self.output_path else None
        return data


@dataclass
class ExtractionSummary:
    source_dir: Path
    output_dir: Path
    results: List[ExtractionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def bytes_written(self) -> int:
        return sum(result.bytes_written for result in self.results)

    def failures_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for result in self.results:
            if result.ok:
                continue
            counts[result.error_kind] = counts.get(result.error_kind, 0) + 1
        return counts


DiscoveredCallback = Callable[[int], None]
ResultCallback = Callable[[int, int, ExtractionResult], None]


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"could not read file: {exc}") from exc


def write_asset(data: bytes, target: Path) -> None:
    try:
        target.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"could not write {target}: {exc}") from exc


def extract_asset_file(
    path: Path,
    output_dir: Path,
    *,
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX,
    first_match: bool = False,
) -> tuple[SoundAsset, Path, int]:
    """Extract the asset of a single source file and write it into ``output_dir``.

    Raises an :class:`AssetError` subclass describing why the file was skipped.
    """

    content = read_source(path)
    asset = scan_fields(content).to_asset(first_match=first_match)
    audio = decode_data_uri(asset.data_uri)
    target = output_dir / f"{asset.name}{output_suffix}"
    write_asset(audio, target)
    return asset, target, len(audio)


def run_pipeline(
    source_dir: Path,
    output_dir: Path,
    *,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX,
    first_match: bool = False,
    on_discovered: Optional[DiscoveredCallback] = None,
    on_result: Optional[ResultCallback] = None,
) -> ExtractionSummary:
    """Extract every sound asset under ``source_dir`` into ``output_dir``.

    A missing source directory aborts before anything is written. Failures of
    individual files are recorded in the summary and never stop the run.
    """

    ensure_source_dir(source_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = list(iter_source_files(source_dir, suffixes))
    if on_discovered is not None:
        on_discovered(len(paths))

    summary = ExtractionSummary(source_dir=source_dir, output_dir=output_dir)
    for index, path in enumerate(paths, start=1):
        relative = path.relative_to(source_dir).as_posix()
        try:
            asset, target, size = extract_asset_file(
                path, output_dir, output_suffix=output_suffix, first_match=first_match
            )
        except AssetError as exc:
            result = ExtractionResult(
                source=path,
                relative_path=relative,
                status=STATUS_FAILED,
                error_kind=exc.kind,
                reason=exc.reason,
            )
        else:
            result = ExtractionResult(
                source=path,
                relative_path=relative,
                status=STATUS_OK,
                asset_name=asset.name,
                media_type=media_type(split_data_uri(asset.data_uri)[0]),
                output_path=target,
                bytes_written=size,
            )
        summary.results.append(result)
        if on_result is not None:
            on_result(index, len(paths), result)
    return summary
