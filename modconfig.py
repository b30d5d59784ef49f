import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from console import DayZPrint

DAYZ_SERVER_APPID = "223350"
DAYZ_WORKSHOP_APPID = "221100"
CONFIG_FILE_NAME = "config.json"
MANIFEST_FILE_NAME = "Mods.json"
SERVER_ONLY_FLAG = "server_only.flag"


@dataclass(frozen=True)
class SyncConfig:
    """Every path and knob a sync run needs. Built once, passed to each stage."""

    server_dir: Path
    workshop_dir: Path
    workshop_appid: str
    keys_dir: Path
    manifest_file: Path
    steam_timeout: Optional[float] = None
    ca_bundle: Optional[Path] = None

    @property
    def content_dir(self) -> Path:
        return self.workshop_dir / "content" / self.workshop_appid


def script_dir() -> Path:
    return Path(__file__).resolve().parent


def _resolve(base_dir: Path, value) -> Path:
    path = Path(str(value))
    return path if path.is_absolute() else base_dir / path


# Try and load the config.json, a missing file just means defaults
def load_config_file(config_path: Path) -> dict:
    try:
        with open(config_path, "r", encoding="utf-8-sig") as config_file:
            config = json.load(config_file)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        DayZPrint("Warning", f"Error decoding {config_path} ({e}), using default paths")
        return {}
    except OSError as e:
        DayZPrint("Warning", f"Could not read {config_path} ({e}), using default paths")
        return {}
    if not isinstance(config, dict):
        DayZPrint("Warning", f"{config_path} is not a JSON object, using default paths")
        return {}
    return config


def build_config(base_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> SyncConfig:
    """
    Derive the server layout from *base_dir* (the script directory by default):

        <base>/dayz/223350                         server root
        <server>/steamapps/workshop/content/221100 downloaded mods
        <server>/keys                              shared keys folder
        <server>/Mods.json                         manifest

    Any of these can be overridden in config.json.
    """
    base_dir = Path(base_dir) if base_dir is not None else script_dir()
    if config_path is None:
        config_path = base_dir / CONFIG_FILE_NAME
    config = load_config_file(Path(config_path))

    server_dir = _resolve(base_dir, config.get("server_dir") or Path("dayz") / DAYZ_SERVER_APPID)
    workshop_dir = _resolve(base_dir, config.get("workshop_dir") or server_dir / "steamapps" / "workshop")
    keys_dir = _resolve(base_dir, config.get("keys_dir") or server_dir / "keys")
    manifest_file = _resolve(base_dir, config.get("manifest_file") or server_dir / MANIFEST_FILE_NAME)
    workshop_appid = str(config.get("workshop_appid") or DAYZ_WORKSHOP_APPID)

    steam_timeout = config.get("steam_timeout")
    if steam_timeout is not None:
        try:
            steam_timeout = float(steam_timeout)
        except (TypeError, ValueError):
            DayZPrint("Warning", f"Ignoring invalid steam_timeout value: {steam_timeout!r}")
            steam_timeout = None

    ca_bundle = config.get("ca_bundle")
    return SyncConfig(
        server_dir=server_dir,
        workshop_dir=workshop_dir,
        workshop_appid=workshop_appid,
        keys_dir=keys_dir,
        manifest_file=manifest_file,
        steam_timeout=steam_timeout,
        ca_bundle=_resolve(base_dir, ca_bundle) if ca_bundle else None,
    )
