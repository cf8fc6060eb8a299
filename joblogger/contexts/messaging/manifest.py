"""
Native messaging host manifest.

Browsers find the host through a JSON manifest named after the host. On
Linux, Chrome reads it from ~/.config/google-chrome/NativeMessagingHosts/; on
macOS from ~/Library/Application Support/Google/Chrome/NativeMessagingHosts/;
on Windows the manifest path is registered under
HKCU\\Software\\Google\\Chrome\\NativeMessagingHosts\\<name>.
"""

import json
import re
from pathlib import Path
from typing import Iterable, Union

HOST_NAME = "com.joblogger.native_host"
HOST_DESCRIPTION = "JobLogger native host: saves captured job postings to local folders"

# Chrome extension ids are 32 characters from a-p
EXTENSION_ID = re.compile(r"^[a-p]{32}$")


def build_host_manifest(host_path: Union[str, Path], extension_ids: Iterable[str]) -> dict:
    """
    Build the manifest dict for the host.

    Args:
        host_path: Absolute path to the host executable (e.g. the joblogger-host script)
        extension_ids: Extension ids allowed to connect

    Returns:
        Manifest ready for json.dump

    Raises:
        ValueError: host_path is relative, or an extension id is malformed
    """
    path = Path(host_path)
    if not path.is_absolute():
        raise ValueError(f"Host path must be absolute: {host_path}")

    origins = []
    for extension_id in extension_ids:
        if not EXTENSION_ID.match(extension_id):
            raise ValueError(f"Invalid extension id: {extension_id}")
        origins.append(f"chrome-extension://{extension_id}/")

    if not origins:
        raise ValueError("At least one extension id is required")

    return {
        "name": HOST_NAME,
        "description": HOST_DESCRIPTION,
        "path": str(path),
        "type": "stdio",
        "allowed_origins": origins,
    }


def write_host_manifest(
    out_dir: Union[str, Path], host_path: Union[str, Path], extension_ids: Iterable[str]
) -> Path:
    """
    Write {HOST_NAME}.json into out_dir (created if missing).

    Returns:
        Path to the written manifest
    """
    manifest = build_host_manifest(host_path, extension_ids)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    manifest_file = out / f"{HOST_NAME}.json"
    with open(manifest_file, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
        f.write("\n")
    return manifest_file
