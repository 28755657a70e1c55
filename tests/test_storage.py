import json

import pytest

from storelib.storage import ListStore, StorageReadError, StoreError


def test_read_missing_file_returns_empty(tmp_path):
    store = ListStore(tmp_path / "missing.json")
    assert not store.exists()
    assert store.read() == []


def test_read_blank_file_returns_empty(tmp_path):
    path = tmp_path / "products.json"
    path.write_text("  \n", encoding="utf-8")
    assert ListStore(path).read() == []


def test_write_creates_parent_and_replaces_whole_file(tmp_path):
    path = tmp_path / "nested" / "dir" / "products.json"
    store = ListStore(path)

    store.write([{"id": 1, "name": "Widget"}, {"id": 2, "name": "Gadget"}])
    store.write([{"id": 2, "name": "Gadget"}])

    assert json.loads(path.read_text(encoding="utf-8")) == [{"id": 2, "name": "Gadget"}]
    assert sorted(p.name for p in path.parent.iterdir()) == ["products.json"]


def test_write_honours_indent(tmp_path):
    path = tmp_path / "products.json"
    ListStore(path, indent=None).write([{"id": 1}])
    assert path.read_text(encoding="utf-8") == '[{"id": 1}]'


@pytest.mark.parametrize("content", ["not-json", '{"id": 1}', '["a"]'])
def test_read_rejects_non_list_payloads(tmp_path, content):
    path = tmp_path / "products.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageReadError) as excinfo:
        ListStore(path).read()
    assert excinfo.value.path == path


def test_read_wraps_os_errors(tmp_path):
    path = tmp_path / "products.json"
    path.mkdir()
    with pytest.raises(StoreError) as excinfo:
        ListStore(path).read()
    assert not isinstance(excinfo.value, StorageReadError)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_failed_write_keeps_previous_contents(tmp_path, monkeypatch):
    path = tmp_path / "products.json"
    store = ListStore(path)
    store.write([{"id": 1}])

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("storelib.storage.os.replace", broken_replace)
    with pytest.raises(StoreError):
        store.write([{"id": 2}])

    assert json.loads(path.read_text(encoding="utf-8")) == [{"id": 1}]
    assert list(tmp_path.glob("*.tmp")) == []


@pytest.mark.asyncio
async def test_mutate_skips_write_when_mutator_returns_none(tmp_path):
    path = tmp_path / "products.json"
    store = ListStore(path)

    result = await store.mutate(lambda items: None)

    assert result == []
    assert not path.exists()


@pytest.mark.asyncio
async def test_mutate_persists_returned_items(tmp_path):
    store = ListStore(tmp_path / "products.json")
    await store.save([{"id": 1}])

    result = await store.mutate(lambda items: [*items, {"id": 2}])

    assert result == [{"id": 1}, {"id": 2}]
    assert await store.load() == [{"id": 1}, {"id": 2}]


@pytest.mark.asyncio
async def test_mutate_propagates_mutator_errors_without_writing(tmp_path):
    path = tmp_path / "products.json"
    store = ListStore(path)
    await store.save([{"id": 1}])
    before = path.read_bytes()

    def explode(items):
        raise ValueError("nope")

    with pytest.raises(ValueError):
        await store.mutate(explode)
    assert path.read_bytes() == before
