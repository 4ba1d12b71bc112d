from nixshares.nixconf.extractor import extract_local_shares, extract_remote_shares
from nixshares.shares.models import LocalShare, RemoteShare

CONFIG = """{ config, pkgs, ... }:

{
  services.samba = {
    enable = true;
    settings = {
      global = {
        "workgroup" = "WORKGROUP";
      };
      "media" = {
        path = "/srv/media";
        browseable = "yes";
        "read only" = "no";
        "guest ok" = yes;
        "force user" = "alice";
      };
      backups = {
        path = "/srv/backups";
        browsable = "no";
        "read only" = yes;
      };
      notashare = "value";
    };
  };

  fileSystems."/mnt/nas" = {
    device = "//nas/share";
    fsType = "cifs";
    options = [ "credentials=/etc/nixos/smb-secrets" "x-systemd.automount" "uid=1001" "gid=101" ];
  };

  fileSystems."/" = {
    device = "/dev/sda1";
    fsType = "ext4";
  };

  fileSystems."/mnt/plain" = {
    device = "//nas/plain";
    fsType = "cifs";
  };
}
"""


def test_extract_local_shares():
    shares = extract_local_shares(CONFIG)
    assert shares == [
        LocalShare(
            name="media",
            path="/srv/media",
            browsable=True,
            read_only=False,
            guest_ok=True,
            force_user="alice",
            force_group="",
        ),
        LocalShare(
            name="backups",
            path="/srv/backups",
            browsable=False,
            read_only=True,
            guest_ok=False,
        ),
    ]


def test_extract_local_shares_without_samba():
    assert extract_local_shares("{ networking.hostName = \"box\"; }") == []
    assert extract_local_shares("") == []


def test_extract_remote_shares_skips_other_types():
    shares = extract_remote_shares(CONFIG, "cifs")
    assert [s.name for s in shares] == ["/mnt/nas", "/mnt/plain"]
    assert shares[0] == RemoteShare(
        name="/mnt/nas",
        remote_path="//nas/share",
        fs_type="cifs",
        credentials="/etc/nixos/smb-secrets",
        force_user="1001",
        force_group="101",
    )


def test_extract_remote_shares_defaults_uid_gid():
    plain = extract_remote_shares(CONFIG, "cifs")[1]
    assert plain.credentials == ""
    assert plain.force_user == "1000"
    assert plain.force_group == "100"


def test_extraction_tolerates_broken_syntax():
    broken = CONFIG[:-2] + "  broken = ;\n}\n"
    assert [s.name for s in extract_local_shares(broken)] == ["media", "backups"]
    assert [s.name for s in extract_remote_shares(broken, "cifs")] == ["/mnt/nas", "/mnt/plain"]


def test_idempotent_read():
    assert extract_local_shares(CONFIG) == extract_local_shares(CONFIG)
    assert extract_remote_shares(CONFIG) == extract_remote_shares(CONFIG)


def test_extraction_tolerates_non_ascii_outside_strings():
    text = '{ services.samba.settings = { x = { path = "/a"; }; }; b = é; }'
    assert extract_local_shares(text) == [LocalShare(name="x", path="/a")]


def test_non_ascii_share_path():
    text = '{ services.samba.settings = { "médias" = { path = "/srv/médias"; }; }; }'
    assert extract_local_shares(text) == [LocalShare(name="médias", path="/srv/médias")]
