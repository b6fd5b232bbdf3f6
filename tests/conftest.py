import pathlib

import pytest


def make_venv(path: pathlib.Path, payload: int = 0) -> pathlib.Path:
    """Create a minimal virtual environment layout at path"""
    (path / "lib").mkdir(parents=True)
    (path / "pyvenv.cfg").write_text("")
    if payload:
        (path / "lib" / "payload.bin").write_bytes(b"x" * payload)
    return path


@pytest.fixture
def venv_factory():
    return make_venv
