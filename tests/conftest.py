import json

import pytest

import console
from modconfig import build_config


class StubLookup:
    """Stands in for the Steam Workshop page, records every ID asked for."""

    def __init__(self, names=None):
        self.names = dict(names or {})
        self.calls = []

    def lookup(self, mod_id):
        self.calls.append(mod_id)
        return self.names.get(mod_id)


@pytest.fixture(autouse=True)
def plain_output():
    console.set_color(False)
    yield
    console.set_color(True)


@pytest.fixture
def layout(tmp_path):
    server = tmp_path / "dayz" / "223350"
    content = server / "steamapps" / "workshop" / "content" / "221100"
    content.mkdir(parents=True)
    return build_config(base_dir=tmp_path)


@pytest.fixture
def make_mod(layout):
    def _make_mod(mod_id, name=None, meta_file="meta.cpp", keys=(), key_dir="keys"):
        mod_dir = layout.content_dir / mod_id
        mod_dir.mkdir(parents=True)
        (mod_dir / "addons").mkdir()
        (mod_dir / "addons" / "data.pbo").write_bytes(b"pbo")
        if name is not None:
            (mod_dir / meta_file).write_text(
                f'protocol = 1;\npublishedid = {mod_id};\nname = "{name}";\n', encoding="utf-8"
            )
        if keys:
            (mod_dir / key_dir).mkdir()
            for key in keys:
                (mod_dir / key_dir / key).write_bytes(b"key")
        return mod_dir
    return _make_mod


@pytest.fixture
def write_manifest_file(layout):
    def _write(data):
        layout.manifest_file.write_text(json.dumps(data), encoding="utf-8")
    return _write


@pytest.fixture
def read_manifest_file(layout):
    def _read():
        return json.loads(layout.manifest_file.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def stub_lookup():
    return StubLookup
