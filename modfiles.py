import os
import shutil
from pathlib import Path
from typing import Iterable, List

from console import DayZPrint
from modconfig import SERVER_ONLY_FLAG

KEY_DIR_NAMES = ("key", "keys")


class CaseInsensitiveSet:
    """Folder names compared the way Windows compares them."""

    def __init__(self, items: Iterable[str] = ()):
        self._items = {}
        for item in items:
            self.add(item)

    def add(self, item: str):
        self._items[item.casefold()] = item

    def __contains__(self, item) -> bool:
        return isinstance(item, str) and item.casefold() in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items.values())


def list_mod_folders(content_dir: Path) -> List[Path]:
    return sorted((p for p in content_dir.iterdir() if p.is_dir()), key=lambda p: p.name)


# Remember which @ folders were flagged server only by an earlier run
def scan_server_only_folders(server_dir: Path) -> CaseInsensitiveSet:
    flagged = CaseInsensitiveSet()
    for entry in server_dir.iterdir():
        if entry.is_dir() and entry.name.startswith("@") and (entry / SERVER_ONLY_FLAG).is_file():
            flagged.add(entry.name)
    return flagged


def relocate_mod(source: Path, server_dir: Path, folder_name: str) -> Path:
    """Move *source* to <server>/<folder_name>, replacing whatever was there.

    An existing folder whose name differs only in case counts as the same mod.
    """
    destination = server_dir / folder_name
    wanted = folder_name.casefold()
    for existing in list(server_dir.iterdir()):
        if existing.name.casefold() != wanted:
            continue
        DayZPrint("Info", f"Replacing existing {existing.name}")
        if existing.is_dir() and not existing.is_symlink():
            shutil.rmtree(existing)
        else:
            existing.unlink()
    shutil.move(str(source), str(destination))
    return destination


def update_sentinel(mod_dir: Path, server_only: bool):
    flag = mod_dir / SERVER_ONLY_FLAG
    if server_only and not flag.exists():
        flag.touch()
        DayZPrint("Info", f"Marked {mod_dir.name} as server only")
    elif not server_only and flag.exists():
        flag.unlink()
        DayZPrint("Info", f"Cleared server only flag on {mod_dir.name}")


def find_key_dirs(mod_dir: Path) -> List[Path]:
    return [p for p in sorted(mod_dir.iterdir()) if p.is_dir() and p.name.lower() in KEY_DIR_NAMES]


def copy_keys(mod_dir: Path, keys_dir: Path) -> int:
    """Copy every .bikey under the mod's key/keys folders flat into *keys_dir*."""
    key_dirs = find_key_dirs(mod_dir)
    if not key_dirs:
        DayZPrint("Info", f"No key folder in {mod_dir.name}")
        return 0
    keys_dir.mkdir(parents=True, exist_ok=True)
    copied = 0
    for key_dir in key_dirs:
        for root, _, files in os.walk(key_dir):
            for file_name in files:
                if not file_name.lower().endswith(".bikey"):
                    continue
                shutil.copy2(os.path.join(root, file_name), keys_dir / file_name)
                copied += 1
    DayZPrint("Info", f"Copied {copied} key(s) from {mod_dir.name}")
    return copied


def cleanup_workshop(content_dir: Path, workshop_dir: Path) -> bool:
    if content_dir.is_dir() and any(content_dir.iterdir()):
        DayZPrint("Info", f"Leaving {workshop_dir}, it still has unprocessed mods")
        return False
    if not workshop_dir.is_dir():
        return False
    shutil.rmtree(workshop_dir)
    DayZPrint("Info", f"Removed {workshop_dir}")
    return True
