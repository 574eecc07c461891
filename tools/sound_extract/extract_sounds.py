#!/usr/bin/env python3
"""Extract base64 data-URI sound assets from source files into audio files.

Every ``.ts``/``.tsx`` file under the source directory that defines a
``name`` and a ``dataUri`` is decoded and written to
``<output-dir>/<name>.mp3``. Files that do not define a sound are reported and
skipped; only a missing source directory or an unexpected error fails the run.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - direct execution fallback
    from tools.sound_extract.errors import ConfigError, MissingInputDirectory
    from tools.sound_extract.pipeline import run_pipeline
    from tools.sound_extract.report import Reporter, write_metrics, write_report
    from tools.sound_extract.settings import resolve_settings
except ModuleNotFoundError:  # pragma: no cover - allow execution via python path/to/script.py
    REPO_ROOT = Path(__file__).resolve().parents[2]
    sys.path.append(str(REPO_ROOT))
    from tools.sound_extract.errors import ConfigError, MissingInputDirectory  # type: ignore
    from tools.sound_extract.pipeline import run_pipeline  # type: ignore
    from tools.sound_extract.report import Reporter, write_metrics, write_report  # type: ignore
    from tools.sound_extract.settings import resolve_settings  # type: ignore

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_UNEXPECTED = 3


def parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--source-dir", type=Path, help="Directory scanned for sound asset sources")
    parser.add_argument("--output-dir", type=Path, help="Directory receiving the decoded audio files")
    parser.add_argument(
        "--suffix",
        dest="suffixes",
        action="append",
        help="Source file suffix to scan (repeatable, default .ts and .tsx)",
    )
    parser.add_argument("--output-suffix", help="Suffix of written audio files (default .mp3)")
    parser.add_argument(
        "--first-match",
        action="store_true",
        default=None,
        help="Use the first name/dataUri pair instead of rejecting files with several",
    )
    parser.add_argument("--config", type=Path, help="YAML settings file (default ./sound_extract.yaml)")
    parser.add_argument("--report", type=Path, help="Write a JSON report of the run to this path")
    parser.add_argument(
        "--metrics-prom-path",
        type=Path,
        help="Write Prometheus textfile metrics for the run to this path",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the final summary")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    reporter = Reporter(quiet=args.quiet)

    try:
        settings = resolve_settings(
            {
                "source_dir": args.source_dir,
                "output_dir": args.output_dir,
                "suffixes": args.suffixes,
                "output_suffix": args.output_suffix,
                "first_match": args.first_match,
                "metrics_prom_path": args.metrics_prom_path,
            },
            config_path=args.config,
        )
        reporter.banner(settings.source_dir, settings.output_dir)
        summary = run_pipeline(
            settings.source_dir,
            settings.output_dir,
            suffixes=settings.suffixes,
            output_suffix=settings.output_suffix,
            first_match=settings.first_match,
            on_discovered=reporter.discovered,
            on_result=reporter.result,
        )
    except MissingInputDirectory as exc:
        reporter.error(str(exc))
        reporter.error("make sure the sounds submodule is initialized: git submodule update --init --recursive")
        return EXIT_FATAL
    except ConfigError as exc:
        reporter.error(str(exc))
        return EXIT_FATAL
    except Exception as exc:  # CLI safety net
        reporter.error(f"unexpected failure: {exc}")
        return EXIT_UNEXPECTED

    reporter.summary(summary)

    if args.report is not None:
        try:
            report_path = write_report(summary, args.report)
        except OSError as exc:
            reporter.error(f"could not write report {args.report}: {exc}")
            return EXIT_UNEXPECTED
        print(f"Report written to {report_path}", file=reporter.out)
    if settings.metrics_prom_path is not None:
        try:
            write_metrics(summary, settings.metrics_prom_path)
        except Exception as exc:  # telemetry failures never fail the run
            reporter.warning(f"failed to write Prometheus metrics to {settings.metrics_prom_path}: {exc}")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
