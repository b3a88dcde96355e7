from __future__ import annotations

import io
from pathlib import Path

import pytest

from bsor.types import Replay

from _builders import encode_replay, make_replay


@pytest.fixture
def replay() -> Replay:
    return make_replay()


@pytest.fixture
def replay_bytes(replay) -> bytes:
    return encode_replay(replay)


@pytest.fixture
def replay_stream(replay_bytes) -> io.BytesIO:
    return io.BytesIO(replay_bytes)


@pytest.fixture
def replay_file(tmp_path, replay_bytes) -> Path:
    path = tmp_path / "sample.bsor"
    path.write_bytes(replay_bytes)
    return path
