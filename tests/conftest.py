import pytest

from script_scaffold.config import LOG_DIR_ENV, TMPDIR_ENV


@pytest.fixture
def script_env(tmp_path, monkeypatch):
    """一个伪造的脚本文件和独立的临时根目录"""
    script = tmp_path / "myscript.py"
    script.write_text("# placeholder\n")
    tmp_root = tmp_path / "tmp"
    tmp_root.mkdir()

    monkeypatch.setenv(TMPDIR_ENV, str(tmp_root))
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    return {"argv0": str(script), "tmp_root": tmp_root, "log_file": tmp_path / "myscript.py.log"}
