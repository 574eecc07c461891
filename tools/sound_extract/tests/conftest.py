import textwrap
from pathlib import Path
from typing import Callable

import pytest

SOUND_TEMPLATE = """
import type {{ SoundAsset }} from "@/registry/soundcn/lib/sound-types";

export const sound: SoundAsset = {{
  name: "{name}",
  dataUri: "{data_uri}",
  duration: 0.1,
}};
"""


@pytest.fixture
def sound_source() -> Callable[[str, str], str]:
    def _render(name: str, data_uri: str) -> str:
        return textwrap.dedent(SOUND_TEMPLATE).format(name=name, data_uri=data_uri)

    return _render


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "sounds"
    path.mkdir()
    return path


@pytest.fixture
def write_source(source_dir: Path) -> Callable[[str, str], Path]:
    def _write(relative: str, content: str) -> Path:
        path = source_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
