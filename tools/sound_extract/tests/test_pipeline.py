import sys
from pathlib import Path

import pytest

from tools.sound_extract.errors import MissingInputDirectory
from tools.sound_extract.pipeline import run_pipeline

HELLO_URI = "data:audio/mpeg;base64,SGVsbG8="


def _snapshot(directory: Path) -> dict:
    return {path.name: path.read_bytes() for path in sorted(directory.iterdir())}


def test_well_formed_file_produces_mp3(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("tick.ts", sound_source("tick", HELLO_URI))
    output_dir = tmp_path / "out"

    summary = run_pipeline(source_dir, output_dir)

    assert (output_dir / "tick.mp3").read_bytes() == b"Hello"
    assert summary.succeeded == 1
    assert summary.failed == 0
    result = summary.results[0]
    assert result.ok
    assert result.output_path == output_dir / "tick.mp3"
    assert result.bytes_written == 5
    assert result.media_type == "audio/mpeg"


def test_failures_are_isolated_per_file(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("a_missing.ts", 'export const x = { name: "lonely" };\n')
    write_source("b_no_comma.ts", sound_source("broken", "data:audio/mpeg;base64"))
    write_source("c_bad_base64.ts", sound_source("garbled", "data:audio/mpeg;base64,@@@@"))
    write_source("d_ok.tsx", sound_source("pop", HELLO_URI))
    output_dir = tmp_path / "out"

    summary = run_pipeline(source_dir, output_dir)

    kinds = {result.relative_path: result.error_kind for result in summary.results}
    assert kinds == {
        "a_missing.ts": "missing_field",
        "b_no_comma.ts": "malformed_data_uri",
        "c_bad_base64.ts": "decode_error",
        "d_ok.tsx": None,
    }
    assert summary.succeeded == 1
    assert summary.failed == 3
    assert summary.failures_by_kind() == {
        "missing_field": 1,
        "malformed_data_uri": 1,
        "decode_error": 1,
    }
    assert sorted(p.name for p in output_dir.iterdir()) == ["pop.mp3"]


def test_counts_cover_every_discovered_file(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("nested/deeper/one.ts", sound_source("one", HELLO_URI))
    write_source("two.ts", "// not a sound\n")
    write_source("README.md", sound_source("ignored", HELLO_URI))

    summary = run_pipeline(source_dir, tmp_path / "out")

    assert summary.total == 2
    assert summary.succeeded + summary.failed == summary.total


def test_unsafe_name_writes_nothing(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("evil.ts", sound_source("../evil", HELLO_URI))
    output_dir = tmp_path / "out"

    summary = run_pipeline(source_dir, output_dir)

    assert summary.results[0].error_kind == "invalid_name"
    assert not (tmp_path / "evil.mp3").exists()
    assert list(output_dir.iterdir()) == []


def test_ambiguous_file_respects_first_match(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("pair.ts", sound_source("first", HELLO_URI) + sound_source("second", HELLO_URI))
    output_dir = tmp_path / "out"

    strict = run_pipeline(source_dir, output_dir)
    lenient = run_pipeline(source_dir, output_dir, first_match=True)

    assert strict.results[0].error_kind == "ambiguous_asset"
    assert lenient.results[0].asset_name == "first"
    assert (output_dir / "first.mp3").read_bytes() == b"Hello"


def test_runs_are_idempotent(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("tick.ts", sound_source("tick", HELLO_URI))
    write_source("tock.ts", sound_source("tock", "data:audio/mpeg;base64,AAECAwQF"))
    output_dir = tmp_path / "out"

    run_pipeline(source_dir, output_dir)
    first = _snapshot(output_dir)
    run_pipeline(source_dir, output_dir)

    assert _snapshot(output_dir) == first
    assert first["tock.mp3"] == bytes(range(6))


def test_creates_nested_output_directory(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("tick.ts", sound_source("tick", HELLO_URI))
    output_dir = tmp_path / "deep" / "er" / "out"

    run_pipeline(source_dir, output_dir)

    assert (output_dir / "tick.mp3").exists()


def test_duplicate_names_last_write_wins(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("a.ts", sound_source("dup", "data:audio/mpeg;base64,AAAA"))
    write_source("b.ts", sound_source("dup", HELLO_URI))
    output_dir = tmp_path / "out"

    summary = run_pipeline(source_dir, output_dir)

    assert summary.succeeded == 2
    assert (output_dir / "dup.mp3").read_bytes() == b"Hello"


def test_write_failure_is_recorded(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("tick.ts", sound_source("tick", HELLO_URI))
    output_dir = tmp_path / "out"
    (output_dir / "tick.mp3").mkdir(parents=True)

    summary = run_pipeline(source_dir, output_dir)

    assert summary.results[0].error_kind == "write_error"
    assert summary.failed == 1


def test_undecodable_text_is_read_error(tmp_path, source_dir) -> None:
    (source_dir / "binary.ts").write_bytes(b"\xff\xfe\x00name")

    summary = run_pipeline(source_dir, tmp_path / "out")

    assert summary.results[0].error_kind == "read_error"


def test_callbacks_receive_progress(tmp_path, source_dir, write_source, sound_source) -> None:
    write_source("one.ts", sound_source("one", HELLO_URI))
    write_source("two.ts", "nothing here")
    discovered = []
    seen = []

    run_pipeline(
        source_dir,
        tmp_path / "out",
        on_discovered=discovered.append,
        on_result=lambda index, total, result: seen.append((index, total, result.ok)),
    )

    assert discovered == [2]
    assert seen == [(1, 2, True), (2, 2, False)]


def test_missing_source_directory_writes_nothing(tmp_path) -> None:
    output_dir = tmp_path / "out"

    with pytest.raises(MissingInputDirectory):
        run_pipeline(tmp_path / "missing", output_dir)

    assert not output_dir.exists()


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX symlinks")
def test_dangling_symlink_is_read_error(tmp_path, source_dir, write_source, sound_source) -> None:
    (source_dir / "gone.ts").symlink_to(source_dir / "missing.ts")
    write_source("tick.ts", sound_source("tick", HELLO_URI))

    summary = run_pipeline(source_dir, tmp_path / "out")

    kinds = {result.relative_path: result.error_kind for result in summary.results}
    assert kinds == {"gone.ts": "read_error", "tick.ts": None}
    assert summary.total == 2
