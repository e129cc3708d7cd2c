import pytest


@pytest.fixture(autouse=True)
def isolated_artifacts(tmp_path, monkeypatch):
    # Log files land in ./artifacts; keep them inside the test's tmp dir.
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SIMPLE_ARCHIVER_FOLDER", raising=False)
    monkeypatch.delenv("SIMPLE_ARCHIVER_VAULT", raising=False)


@pytest.fixture
def vault(tmp_path):
    root = tmp_path / "vault"
    root.mkdir()
    return root
