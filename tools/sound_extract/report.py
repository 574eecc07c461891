"""Console, JSON and Prometheus reporting for extraction runs."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, TextIO

from prometheus_client import CollectorRegistry, Counter, Gauge, write_to_textfile

from tools.sound_extract.pipeline import ExtractionResult, ExtractionSummary

RULE = "=" * 60


class Reporter:
    """Prints run progress to stdout and problems to stderr."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        quiet: bool = False,
    ) -> None:
        self._out = out
        self._err = err
        self.quiet = quiet

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def banner(self, source_dir: Path, output_dir: Path) -> None:
        if self.quiet:
            return
        print("Sound extraction", file=self.out)
        print(f"  source directory: {source_dir}", file=self.out)
        print(f"  output directory: {output_dir}", file=self.out)
        print("", file=self.out)

    def discovered(self, count: int) -> None:
        if self.quiet:
            return
        print(f"Found {count} source files", file=self.out)
        if count == 0:
            print("[warn] nothing to extract", file=self.out)

    def result(self, index: int, total: int, result: ExtractionResult) -> None:
        if self.quiet:
            return
        prefix = f"[{index}/{total}]"
        if result.ok:
            print(
                f"{prefix} wrote {result.output_path.name} ({result.relative_path})",
                file=self.out,
            )
        else:
            print(f"{prefix} skip {result.relative_path}: {result.reason}", file=self.out)

    def summary(self, summary: ExtractionSummary) -> None:
        print(RULE, file=self.out)
        print("Summary:", file=self.out)
        print(f"  extracted: {summary.succeeded} files", file=self.out)
        print(f"  failed:    {summary.failed} files", file=self.out)
        for kind, count in sorted(summary.failures_by_kind().items()):
            print(f"    {kind}: {count}", file=self.out)
        print(f"  output directory: {summary.output_dir}", file=self.out)
        print(RULE, file=self.out)

    def error(self, message: str) -> None:
        print(f"error: {message}", file=self.err)

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=self.err)


def build_report(summary: ExtractionSummary) -> Dict:
    return {
        "source_dir": summary.source_dir.as_posix(),
        "output_dir": summary.output_dir.as_posix(),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "counts": {
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "total": summary.total,
        },
        "failures_by_kind": summary.failures_by_kind(),
        "results": [result.to_dict() for result in summary.results],
    }


def write_report(summary: ExtractionSummary, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fp:
        json.dump(build_report(summary), fp, indent=2)
    return path


def write_metrics(summary: ExtractionSummary, path: Path) -> Path:
    """Write the run counters to a Prometheus textfile collector file."""

    registry = CollectorRegistry()
    files = Counter(
        "sound_extract_files",
        "Source files examined by the sound extractor.",
        registry=registry,
    )
    succeeded = Counter(
        "sound_extract_files_succeeded",
        "Source files whose sound asset was written.",
        registry=registry,
    )
    failed = Counter(
        "sound_extract_files_failed",
        "Source files skipped, by failure kind.",
        ["kind"],
        registry=registry,
    )
    written = Gauge(
        "sound_extract_bytes_written",
        "Bytes of decoded audio written during the last run.",
        registry=registry,
    )

    files.inc(summary.total)
    succeeded.inc(summary.succeeded)
    for kind, count in summary.failures_by_kind().items():
        failed.labels(kind=kind).inc(count)
    written.set(summary.bytes_written)

    path.parent.mkdir(parents=True, exist_ok=True)
    write_to_textfile(str(path), registry)
    return path
