import asyncio
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rucheng_dialect.app.app import RuchengDialectApp
from rucheng_dialect.app.data.audio import FileAudioProbe
from rucheng_dialect.app.data.sources import StaticDictionarySource


SAMPLE_DICTIONARY = {
    "汝": [{"phonetic": "ru35", "meaning": "你"}],
    "汝城": [{"phonetic": "ru35-cheŋ21", "meaning": "县名"}],
    "城": [{"phonetic": "cheŋ21"}],
    "城门": [{"phonetic": "cheŋ21-men21"}],
    "人": [{"phonetic": "ŋin21"}, {"phonetic": "in21", "note": "文读"}],
}


@pytest.fixture
def sample_dictionary():
    """Fresh copy of a small dictionary with characters and words."""

    return json.loads(json.dumps(SAMPLE_DICTIONARY, ensure_ascii=False))


@pytest.fixture
def audio_dir(tmp_path):
    directory = tmp_path / "static" / "audio"
    directory.mkdir(parents=True)
    (directory / "ru35.m4a").write_bytes(b"\x00")
    return directory


@pytest.fixture
def loaded_app(sample_dictionary, audio_dir):
    """Application context whose dictionary has finished loading."""

    app = RuchengDialectApp(
        source=StaticDictionarySource(json.dumps(sample_dictionary, ensure_ascii=False)),
        audio_probe=FileAudioProbe(audio_dir),
    )
    asyncio.run(app.initialize())
    return app
