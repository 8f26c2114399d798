import pytest
from fastapi.testclient import TestClient

from rcli.http_serve import create_app


@pytest.fixture
def client(tmp_path):
    (tmp_path / "hello.txt").write_text("hello from disk")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "nested.md").write_text("# nested")
    (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00")
    return TestClient(create_app(tmp_path))


def test_root_lists_directory(client):
    res = client.get("/")
    assert res.status_code == 200
    assert '<a href="/static/hello.txt">hello.txt</a>' in res.text
    assert '<a href="/static/sub">sub</a>' in res.text


def test_file_handler(client):
    res = client.get("/hello.txt")
    assert res.status_code == 200
    assert res.text == "hello from disk"


def test_subdirectory_listing(client):
    res = client.get("/sub")
    assert res.status_code == 200
    assert '/static/sub/nested.md' in res.text


def test_static_files(client):
    res = client.get("/static/sub/nested.md")
    assert res.status_code == 200
    assert res.text == "# nested"


def test_missing_file(client):
    assert client.get("/nope.txt").status_code == 404


def test_binary_file_is_server_error(client):
    assert client.get("/blob.bin").status_code == 500


def test_path_escape_is_not_found(client):
    assert client.get("/%2e%2e/%2e%2e/etc/passwd").status_code == 404
