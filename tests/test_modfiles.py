from modfiles import (
    CaseInsensitiveSet,
    cleanup_workshop,
    copy_keys,
    find_key_dirs,
    relocate_mod,
    scan_server_only_folders,
    update_sentinel,
)


def test_case_insensitive_set():
    names = CaseInsensitiveSet(["@CF", "@Dabs Framework"])
    assert "@cf" in names
    assert "@DABS FRAMEWORK" in names
    assert "@Other" not in names
    assert None not in names
    assert len(names) == 2
    names.add("@cf")
    assert len(names) == 2


def test_scan_server_only_folders(tmp_path):
    (tmp_path / "@Flagged").mkdir()
    (tmp_path / "@Flagged" / "server_only.flag").touch()
    (tmp_path / "@Plain").mkdir()
    (tmp_path / "keys").mkdir()
    (tmp_path / "keys" / "server_only.flag").touch()
    flagged = scan_server_only_folders(tmp_path)
    assert "@flagged" in flagged
    assert "@Plain" not in flagged
    assert "keys" not in flagged


def test_relocate_replaces_existing(tmp_path):
    source = tmp_path / "workshop" / "123"
    source.mkdir(parents=True)
    (source / "new.txt").write_text("new", encoding="utf-8")
    old = tmp_path / "@Test Mod"
    old.mkdir()
    (old / "stale.txt").write_text("old", encoding="utf-8")

    destination = relocate_mod(source, tmp_path, "@Test Mod")

    assert destination == old
    assert not source.exists()
    assert (destination / "new.txt").is_file()
    assert not (destination / "stale.txt").exists()


def test_relocate_replaces_folder_with_other_case(tmp_path):
    source = tmp_path / "workshop" / "77"
    source.mkdir(parents=True)
    (source / "new.txt").write_text("new", encoding="utf-8")
    old = tmp_path / "@server tools"
    old.mkdir()
    (old / "server_only.flag").touch()
    (tmp_path / "@Other").mkdir()

    destination = relocate_mod(source, tmp_path, "@Server Tools")

    assert destination == tmp_path / "@Server Tools"
    assert (destination / "new.txt").is_file()
    assert not (destination / "server_only.flag").exists()
    assert sorted(p.name for p in tmp_path.iterdir() if p.name.startswith("@")) == ["@Other", "@Server Tools"]


def test_sentinel_toggles(tmp_path):
    flag = tmp_path / "server_only.flag"
    update_sentinel(tmp_path, True)
    assert flag.is_file() and flag.stat().st_size == 0
    update_sentinel(tmp_path, True)
    assert flag.is_file()
    update_sentinel(tmp_path, False)
    assert not flag.exists()
    update_sentinel(tmp_path, False)
    assert not flag.exists()


def test_find_key_dirs_any_case(tmp_path):
    for name in ("Keys", "key", "addons", "keystore"):
        (tmp_path / name).mkdir()
    assert sorted(p.name for p in find_key_dirs(tmp_path)) == ["Keys", "key"]


def test_copy_keys_flattens_and_overwrites(tmp_path):
    mod = tmp_path / "@Mod"
    (mod / "Keys" / "nested").mkdir(parents=True)
    (mod / "Keys" / "mod.bikey").write_bytes(b"new")
    (mod / "Keys" / "nested" / "other.BIKEY").write_bytes(b"other")
    (mod / "Keys" / "readme.txt").write_text("x", encoding="utf-8")
    keys = tmp_path / "keys"
    keys.mkdir()
    (keys / "mod.bikey").write_bytes(b"old")

    assert copy_keys(mod, keys) == 2
    assert (keys / "mod.bikey").read_bytes() == b"new"
    assert (keys / "other.BIKEY").is_file()
    assert not (keys / "readme.txt").exists()


def test_copy_keys_without_key_folder(tmp_path):
    mod = tmp_path / "@Mod"
    mod.mkdir()
    assert copy_keys(mod, tmp_path / "keys") == 0
    assert not (tmp_path / "keys").exists()


def test_copy_keys_creates_keys_folder(tmp_path):
    mod = tmp_path / "@Mod"
    (mod / "key").mkdir(parents=True)
    (mod / "key" / "a.bikey").write_bytes(b"a")
    copy_keys(mod, tmp_path / "keys")
    assert (tmp_path / "keys" / "a.bikey").is_file()


def test_cleanup_removes_drained_tree(tmp_path):
    workshop = tmp_path / "steamapps" / "workshop"
    content = workshop / "content" / "221100"
    content.mkdir(parents=True)
    (workshop / "appworkshop_221100.acf").write_text("", encoding="utf-8")
    assert cleanup_workshop(content, workshop)
    assert not workshop.exists()
    assert (tmp_path / "steamapps").is_dir()


def test_cleanup_keeps_tree_with_leftovers(tmp_path):
    workshop = tmp_path / "steamapps" / "workshop"
    content = workshop / "content" / "221100"
    (content / "999").mkdir(parents=True)
    assert not cleanup_workshop(content, workshop)
    assert (content / "999").is_dir()
