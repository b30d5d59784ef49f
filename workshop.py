import html
import re
from pathlib import Path
from typing import Optional

import requests

from console import DayZPrint

WORKSHOP_ITEM_URL = "https://steamcommunity.com/workshop/filedetails/?id={mod_id}"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"

# Checked in this order, first one with a name wins
METADATA_FILES = ("meta.cpp", "mod.cpp")

name_pattern = re.compile(r'^[ \t]*name[ \t]*=[ \t]*"([^"]*)"', re.MULTILINE)
workshop_title_pattern = re.compile(r'<div class="workshopItemTitle">(.*?)</div>', re.DOTALL)
invalid_folder_chars = re.compile(r'[\\/:*?"<>|]')


def sanitize_folder_name(name: str) -> str:
    return invalid_folder_chars.sub("-", name)


def read_metadata_name(mod_dir: Path) -> Optional[str]:
    """Return the `name = "..."` value from meta.cpp or mod.cpp, if either has one."""
    for file_name in METADATA_FILES:
        path = mod_dir / file_name
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            DayZPrint("Warning", f"Could not read {path}: {e}")
            continue
        match = name_pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def extract_workshop_title(page: str) -> Optional[str]:
    match = workshop_title_pattern.search(page)
    if not match:
        return None
    title = html.unescape(match.group(1)).strip()
    return title or None


class NameLookup:
    """Something that can turn a workshop ID into a display name, or None."""

    def lookup(self, mod_id: str) -> Optional[str]:
        raise NotImplementedError


class SteamWorkshopLookup(NameLookup):
    """Scrapes the title off the public Steam Workshop item page."""

    def __init__(self, timeout: Optional[float] = None, ca_bundle: Optional[Path] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        if ca_bundle is not None:
            if Path(ca_bundle).is_file():
                self.session.verify = str(ca_bundle)
            else:
                DayZPrint("Warning", f"CA bundle {ca_bundle} not found, using default certificate verification")

    def lookup(self, mod_id: str) -> Optional[str]:
        url = WORKSHOP_ITEM_URL.format(mod_id=mod_id)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            DayZPrint("Warning", f"Steam lookup for {mod_id} failed: {e}")
            return None
        return extract_workshop_title(response.text)


def resolve_mod_name(mod_dir: Path, mod_id: str, lookup: NameLookup) -> Optional[str]:
    name = read_metadata_name(mod_dir)
    if name:
        return name
    DayZPrint("Info", f"No local name for {mod_id}, asking the Steam Workshop")
    return lookup.lookup(mod_id)
