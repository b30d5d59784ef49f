#!/usr/bin/env python3
"""
syncmods.py: move Steam Workshop downloads into the DayZ server layout.

For every <ID> folder under steamapps/workshop/content/221100 this:

  1. works out the mod name (meta.cpp, mod.cpp, then the Steam Workshop page),
  2. moves the folder to <server>/@<Name>, replacing the previous copy,
  3. sets or clears <server>/@<Name>/server_only.flag,
  4. copies the mod's .bikey files into <server>/keys unless it is server only,

then removes the workshop folder once it is empty and rewrites Mods.json.

Mods.json lists which workshop IDs are client+server mods and which are server
only. Without those lists, a mod stays server only if its @ folder carried the
flag before this run.

Exit codes: 0 when done (or nothing to do), 1 when the server folder is missing.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

import console
from console import DayZPrint
from manifest import Manifest, load_manifest, write_manifest
from modconfig import SyncConfig, build_config
from modfiles import (
    CaseInsensitiveSet,
    cleanup_workshop,
    copy_keys,
    list_mod_folders,
    relocate_mod,
    scan_server_only_folders,
    update_sentinel,
)
from workshop import NameLookup, SteamWorkshopLookup, resolve_mod_name, sanitize_folder_name


class ModSync:
    """One sync run over the downloaded workshop folders."""

    def __init__(self, config: SyncConfig, lookup: NameLookup):
        self.config = config
        self.lookup = lookup
        self.manifest = Manifest()
        self.id_to_name: Dict[str, str] = {}
        self.flagged_before = CaseInsensitiveSet()

    def is_server_only(self, mod_id: str, folder_name: str) -> bool:
        if self.manifest.has_id_lists():
            if mod_id in self.manifest.server_only_ids:
                return True
            if mod_id not in self.manifest.client_server_ids:
                DayZPrint("Warning", f"{mod_id} ({folder_name}) is not listed in {self.config.manifest_file.name}, treating it as client+server")
            return False
        return folder_name in self.flagged_before

    def process_mod(self, mod_dir: Path):
        mod_id = mod_dir.name
        name = resolve_mod_name(mod_dir, mod_id, self.lookup)
        if not name:
            DayZPrint("Error", f"Could not find a name for mod {mod_id}, skipping it")
            return

        folder_name = "@" + sanitize_folder_name(name)
        try:
            destination = relocate_mod(mod_dir, self.config.server_dir, folder_name)
        except OSError as e:
            DayZPrint("Error", f"Failed to move {mod_id} to {folder_name}: {e}")
            return
        self.id_to_name[mod_id] = folder_name
        DayZPrint("Success", f"{mod_id} -> {folder_name}")

        server_only = self.is_server_only(mod_id, folder_name)
        try:
            update_sentinel(destination, server_only)
        except OSError as e:
            DayZPrint("Error", f"Failed to update server only flag on {folder_name}: {e}")
        if server_only:
            DayZPrint("Info", f"{folder_name} is server only, not copying keys")
            return
        try:
            copy_keys(destination, self.config.keys_dir)
        except OSError as e:
            DayZPrint("Error", f"Failed to copy keys for {folder_name}: {e}")

    def run(self) -> int:
        config = self.config
        if not config.server_dir.is_dir():
            DayZPrint("Error", f"Server folder not found: {config.server_dir}")
            return 1

        self.manifest = load_manifest(config.manifest_file)

        content_dir = config.content_dir
        if not content_dir.is_dir():
            DayZPrint("Info", f"No workshop downloads in {content_dir}, nothing to do")
            return 0
        mod_dirs = list_mod_folders(content_dir)
        if not mod_dirs:
            DayZPrint("Info", "No workshop mods to process")
            return 0

        if not self.manifest.has_id_lists():
            self.flagged_before = scan_server_only_folders(config.server_dir)
            if len(self.flagged_before):
                DayZPrint("Info", f"Keeping server only flag on: {', '.join(sorted(self.flagged_before))}")

        DayZPrint("Info", f"Processing {len(mod_dirs)} workshop mod(s)")
        for mod_dir in mod_dirs:
            self.process_mod(mod_dir)

        try:
            cleanup_workshop(content_dir, config.workshop_dir)
        except OSError as e:
            DayZPrint("Warning", f"Could not remove {config.workshop_dir}: {e}")

        try:
            write_manifest(config.manifest_file, self.manifest, self.id_to_name)
        except OSError as e:
            DayZPrint("Error", f"Failed to write {config.manifest_file}: {e}")
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Move Steam Workshop mods into the DayZ server folder and update Mods.json"
    )
    # Callers pass one argument along, it is not used
    ap.add_argument("caller_arg", nargs="?", default=None, help=argparse.SUPPRESS)
    ap.add_argument("--base-dir", type=Path, default=None, help="Folder that holds dayz/223350 (default: this script's folder)")
    ap.add_argument("--config", type=Path, default=None, help="Path to config.json (default: <base-dir>/config.json)")
    ap.add_argument("--no-color", action="store_true", help="Plain log output")
    args = ap.parse_args(list(argv) if argv is not None else None)

    if args.no_color:
        console.set_color(False)

    config = build_config(args.base_dir, args.config)
    lookup = SteamWorkshopLookup(timeout=config.steam_timeout, ca_bundle=config.ca_bundle)
    return ModSync(config, lookup).run()


if __name__ == "__main__":
    sys.exit(main())
