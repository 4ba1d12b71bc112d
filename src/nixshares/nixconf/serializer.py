"""Render share records as Nix text.

Output is deterministic: every property is always written, in a fixed order,
with samba booleans spelled ``yes``/``no`` (samba's own tokens, which Nix
sees as plain identifiers) rather than ``true``/``false``.
"""
from typing import List

from nixshares.shares.models import LocalShare, RemoteShare

REMOTE_FIXED_OPTIONS = [
    "x-systemd.automount",
    "noauto",
    "x-systemd.idle-timeout=300",
    "x-systemd.device-timeout=10s",
    "x-systemd.mount-timeout=10s",
]

SAMBA_GLOBAL_SECTION = """      global = {
        "workgroup" = "WORKGROUP";
        "server string" = "smbnix";
        "netbios name" = "smbnix";
        "security" = "user";
        # note: localhost is the ipv6 localhost ::1
        "hosts allow" = "192.168.0. 127.0.0.1 localhost";
        "hosts deny" = "0.0.0.0/0";
        "guest account" = "nobody";
        "map to guest" = "bad user";
      };"""


def nix_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")
    return f'"{escaped}"'


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def render_local_share(share: LocalShare) -> str:
    return "\n".join([
        f"    {nix_string(share.name)} = {{",
        f"      path = {nix_string(share.path)};",
        f"      browseable = {yes_no(share.browsable)};",
        f'      "read only" = {yes_no(share.read_only)};',
        f'      "guest ok" = {yes_no(share.guest_ok)};',
        f'      "force user" = {nix_string(share.force_user)};',
        f'      "force group" = {nix_string(share.force_group)};',
        "    };",
    ])


def render_samba_section(share: LocalShare) -> str:
    """A complete ``services.samba`` block holding a default ``global`` section and ``share``.

    Used when the configuration has no samba settings yet.
    """
    return "\n".join([
        "  services.samba = {",
        "    enable = true;",
        '    securityType = "user";',
        "    openFirewall = true;",
        "    settings = {",
        SAMBA_GLOBAL_SECTION,
        render_local_share(share),
        "    };",
        "  };",
    ])


def remote_options(share: RemoteShare) -> List[str]:
    options = []
    if share.credentials:
        options.append(f"credentials={share.credentials}")
    options.extend(REMOTE_FIXED_OPTIONS)
    if share.force_user:
        options.append(f"uid={share.force_user}")
    if share.force_group:
        options.append(f"gid={share.force_group}")
    return options


def render_remote_share(share: RemoteShare, indent: str = "  ", nested: bool = False) -> str:
    """Render a ``fileSystems`` entry.

    With ``nested`` the key is only the quoted mount point, for insertion into
    an existing ``fileSystems = { ... };`` block.
    """
    key = nix_string(share.name) if nested else f"fileSystems.{nix_string(share.name)}"
    lines = [
        f"{indent}{key} = {{",
        f"{indent}  device = {nix_string(share.remote_path)};",
        f"{indent}  fsType = {nix_string(share.fs_type)};",
        f"{indent}  options = [",
    ]
    lines.extend(f"{indent}    {nix_string(option)}" for option in remote_options(share))
    lines.extend([
        f"{indent}  ];",
        f"{indent}}};",
    ])
    return "\n".join(lines)
