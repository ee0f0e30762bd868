"""Shared test fixtures for linewise."""

import pytest

from linewise import WriterConfig, writers


# Pinned so a developer's linewise.yaml cannot change the expected output.
@writers(config=WriterConfig())
class DatumWriter:
    """Writes one ``datum: X`` line per element."""

    def write_handle(self, data, handle, prefix="datum"):
        for datum in data:
            handle.write(f"{prefix}: {datum}\n")


@writers(method="emit", binmode="raw")
class RawEmitter:
    """Class-level writer with a custom delegate name and octet default."""

    @classmethod
    def emit(cls, data, handle):
        handle.write("".join(data))


@pytest.fixture(autouse=True)
def _no_user_config(tmp_path_factory, monkeypatch):
    """Keep user-global and env-selected config files out of every test."""
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    monkeypatch.delenv("LINEWISE_CONFIG", raising=False)


@pytest.fixture
def datum_writer():
    return DatumWriter()


@pytest.fixture
def sample_data():
    return ["a", "b"]
