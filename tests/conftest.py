import pytest

from porkbun_ddns.logger import set_silent


@pytest.fixture(autouse=True)
def reset_log_level():
    """Undo any silencing done by a test"""
    yield
    set_silent(False)


@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text('{"apikey":"ak","secretapikey":"sk"}', encoding="utf-8")
    return path
