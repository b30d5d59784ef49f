import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from console import DayZPrint


@dataclass
class Manifest:
    client_server_ids: List[str] = field(default_factory=list)
    server_only_ids: List[str] = field(default_factory=list)

    def has_id_lists(self) -> bool:
        return bool(self.client_server_ids or self.server_only_ids)


def _id_list(value) -> List[str]:
    # ConvertTo-Json style writers collapse a one-element array to a scalar
    if value is None:
        return []
    if isinstance(value, (str, int)):
        value = [value]
    if not isinstance(value, list):
        return []
    ids = []
    for item in value:
        if isinstance(item, (str, int)) and not isinstance(item, bool):
            item = str(item).strip()
            if item:
                ids.append(item)
    return ids


def load_manifest(path: Path) -> Manifest:
    """Read Mods.json. Missing, empty or broken files all give an empty manifest."""
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        DayZPrint("Info", f"No {path.name} found, continuing without ID lists")
        return Manifest()
    except OSError as e:
        DayZPrint("Warning", f"Could not read {path}: {e}")
        return Manifest()

    if not raw.strip():
        DayZPrint("Info", f"{path.name} is empty, continuing without ID lists")
        return Manifest()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        DayZPrint("Warning", f"Could not parse {path.name} ({e}), continuing without ID lists")
        return Manifest()
    if not isinstance(data, dict):
        DayZPrint("Warning", f"{path.name} is not a JSON object, continuing without ID lists")
        return Manifest()

    return Manifest(
        client_server_ids=_id_list(data.get("ClientServerIds")),
        server_only_ids=_id_list(data.get("ServerOnlyIds")),
    )


def names_for(ids: List[str], id_to_name: Dict[str, str]) -> List[str]:
    # IDs that were not resolved this run are left out
    return [id_to_name[mod_id] for mod_id in ids if mod_id in id_to_name]


def write_manifest(path: Path, manifest: Manifest, id_to_name: Dict[str, str]):
    client_server_names = names_for(manifest.client_server_ids, id_to_name)
    server_only_names = names_for(manifest.server_only_ids, id_to_name)
    data = {
        "ClientServerIds": list(manifest.client_server_ids),
        "ServerOnlyIds": list(manifest.server_only_ids),
        "ClientServerNames": client_server_names,
        "ServerOnlyNames": server_only_names,
        "ClientServerJoined": ";".join(client_server_names),
        "ServerOnlyJoined": ";".join(server_only_names),
    }
    with open(path, "w", encoding="utf-8") as file:
        json.dump(data, file, indent=4, ensure_ascii=False)
        file.write("\n")
    DayZPrint("Success", f"Wrote {path.name}: {len(client_server_names)} client+server, {len(server_only_names)} server-only")
