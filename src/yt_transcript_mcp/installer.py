"""
installer.py — Register the MCP server with local host applications.

Each supported client (Claude Desktop, Cursor, Cline, ...) keeps a JSON
configuration file with the shape::

    {"mcpServers": {"<name>": {"command": "...", "args": [...]}}}

This module finds those files, and adds, removes, verifies and lists our
entry in them.  A client counts as installed when the directory holding
its configuration file exists.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CLIENT_NAMES = {
    "claude-code": "Claude Code",
    "claude-desktop": "Claude Desktop",
    "cursor": "Cursor IDE",
    "cline": "Cline (VSCode Extension)",
    "roo-cline": "Roo-Cline",
    "continue": "Continue.dev",
}

SERVER_NAME = "youtube-transcript"

DEFAULT_SERVER_CONFIG = {"command": "yt-transcript", "args": ["serve"]}

_VSCODE_EXTENSIONS = {
    "cline": "saoudrizwan.claude-dev",
    "roo-cline": "rooveterinaryinc.roo-cline",
}


class ConfigFileError(Exception):
    """A client configuration file could not be read or written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Config file {path}: {reason}")
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Paths and detection
# ---------------------------------------------------------------------------

def _app_data_dir(home: str, platform: str) -> str:
    """Per-user application data directory for the given platform."""
    if platform == "darwin":
        return os.path.join(home, "Library", "Application Support")
    if platform == "win32":
        return os.path.join(home, "AppData", "Roaming")
    return os.path.join(home, ".config")


def config_paths(home: str | None = None, platform: str | None = None) -> dict[str, str]:
    """
    Map each client ID to its configuration file path.

    Args:
        home:     Home directory; defaults to the current user's.
        platform: A sys.platform value; defaults to the running platform.
    """
    home = home or os.path.expanduser("~")
    platform = platform or sys.platform
    app_data = _app_data_dir(home, platform)

    paths = {
        "claude-code": os.path.join(home, ".claude.json"),
        "claude-desktop": os.path.join(app_data, "Claude", "claude_desktop_config.json"),
        "cursor": os.path.join(app_data, "Cursor", "User", "mcp.json"),
        "continue": os.path.join(home, ".continue", "config.json"),
    }
    for client_id, extension in _VSCODE_EXTENSIONS.items():
        paths[client_id] = os.path.join(
            app_data, "Code", "User", "globalStorage", extension, "settings",
            "cline_mcp_settings.json",
        )
    return paths


@dataclass(frozen=True)
class Detection:
    """Whether a client appears to be installed, and where its config lives."""
    client_id: str
    name: str
    installed: bool
    config_path: str | None
    reason: str | None = None


def detect_client(client_id: str, paths: dict[str, str] | None = None) -> Detection:
    paths = paths if paths is not None else config_paths()
    name = CLIENT_NAMES.get(client_id, client_id)
    config_path = paths.get(client_id)

    if config_path is None:
        return Detection(client_id, name, False, None, "Unknown client")
    if not os.path.isdir(os.path.dirname(config_path)):
        return Detection(client_id, name, False, config_path, "Client directory not found")
    return Detection(client_id, name, True, config_path)


def detect_all(paths: dict[str, str] | None = None) -> list[Detection]:
    paths = paths if paths is not None else config_paths()
    return [detect_client(client_id, paths) for client_id in CLIENT_NAMES]


# ---------------------------------------------------------------------------
# Config file I/O
# ---------------------------------------------------------------------------

def read_config(path: str) -> dict:
    """Read a JSON config file; a missing file reads as an empty config."""
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        raise ConfigFileError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigFileError(path, "top-level JSON value is not an object")
    return data


def write_config(path: str, config: dict) -> None:
    """Write a config file with 2-space indentation, creating parent dirs."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(config, fh, indent=2)
            fh.write("\n")
    except OSError as exc:
        raise ConfigFileError(path, str(exc)) from exc


def is_registered(config: dict, server_name: str = SERVER_NAME) -> bool:
    servers = config.get("mcpServers")
    return isinstance(servers, dict) and bool(servers.get(server_name))


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Result:
    """Outcome of add / remove / verify for one client."""
    client_id: str
    success: bool
    message: str
    changed: bool = False
    config_path: str | None = None


def register(
    detection: Detection,
    server_name: str = SERVER_NAME,
    server_config: dict | None = None,
) -> Result:
    """Add our server entry to a client's config (no-op if already there)."""
    if not detection.installed:
        return Result(detection.client_id, False, f"{detection.name} is not installed")

    config = read_config(detection.config_path)
    if is_registered(config, server_name):
        return Result(
            detection.client_id, True,
            f"{server_name} is already registered with {detection.name}",
            config_path=detection.config_path,
        )

    servers = config.get("mcpServers")
    if not isinstance(servers, dict):
        servers = config["mcpServers"] = {}
    servers[server_name] = dict(server_config or DEFAULT_SERVER_CONFIG)
    write_config(detection.config_path, config)
    return Result(
        detection.client_id, True,
        f"Registered {server_name} with {detection.name} (restart it to pick up the change)",
        changed=True,
        config_path=detection.config_path,
    )


def unregister(detection: Detection, server_name: str = SERVER_NAME) -> Result:
    """Remove our server entry from a client's config (no-op if absent)."""
    if not detection.installed:
        return Result(detection.client_id, False, f"{detection.name} is not installed")

    config = read_config(detection.config_path)
    if not is_registered(config, server_name):
        return Result(
            detection.client_id, True,
            f"{server_name} is not registered with {detection.name}",
            config_path=detection.config_path,
        )

    del config["mcpServers"][server_name]
    write_config(detection.config_path, config)
    return Result(
        detection.client_id, True,
        f"Unregistered {server_name} from {detection.name}",
        changed=True,
        config_path=detection.config_path,
    )


def verify(detection: Detection, server_name: str = SERVER_NAME) -> Result:
    """Check that our entry exists and names a command to run."""
    if not detection.installed:
        return Result(detection.client_id, False, f"{detection.name} is not installed")

    config = read_config(detection.config_path)
    if not is_registered(config, server_name):
        return Result(detection.client_id, False, f"{server_name} is not registered",
                      config_path=detection.config_path)

    entry = config["mcpServers"][server_name]
    if not isinstance(entry, dict) or not entry.get("command"):
        return Result(detection.client_id, False, "Missing 'command' in server configuration",
                      config_path=detection.config_path)
    return Result(detection.client_id, True, "Configuration is valid",
                  config_path=detection.config_path)


def list_registrations(
    paths: dict[str, str] | None = None,
    server_name: str = SERVER_NAME,
) -> list[Detection]:
    """Installed clients whose config currently has our server entry."""
    return [
        detection
        for detection in detect_all(paths)
        if detection.installed and is_registered(read_config(detection.config_path), server_name)
    ]
