import pytest

from nixshares.config.source import TextConfigSource
from nixshares.exceptions import NotFoundError, ValidationError
from nixshares.nixconf.extractor import extract_remote_shares
from nixshares.nixconf.parser import parse
from nixshares.shares.models import RemoteShare
from nixshares.shares.remote import (
    RemoteShareManager,
    add_remote_share,
    delete_remote_share,
    update_remote_share,
)

DOTTED = """{ config, pkgs, ... }:

{
  fileSystems."/mnt/a" = {
    device = "//nas/a";
    fsType = "cifs";
    options = [ "uid=1000" "gid=100" ];
  };

  services.openssh.enable = true;
}
"""

NESTED = """{ config, pkgs, ... }:

{
  fileSystems = {
    "/" = {
      device = "/dev/sda1";
      fsType = "ext4";
    };
  };
}
"""

EMPTY = """{ config, pkgs, ... }:

{
  networking.hostName = "box";
}
"""

NAS_B = RemoteShare(name="/mnt/b", remote_path="//nas/b", credentials="/root/.smb")


def test_add_next_to_dotted_entries():
    text = add_remote_share(DOTTED, NAS_B)
    assert parse(text).ok
    assert [s.name for s in extract_remote_shares(text, "cifs")] == ["/mnt/a", "/mnt/b"]
    assert '  fileSystems."/mnt/b" = {' in text
    assert text.startswith(DOTTED[:DOTTED.index("  services.openssh")])


def test_add_into_nested_block():
    text = add_remote_share(NESTED, NAS_B)
    assert parse(text).ok
    assert '    "/mnt/b" = {' in text
    assert 'fileSystems."/mnt/b"' not in text
    assert extract_remote_shares(text, "cifs") == [NAS_B]


def test_add_without_filesystems():
    text = add_remote_share(EMPTY, NAS_B)
    assert parse(text).ok
    assert extract_remote_shares(text, "cifs") == [NAS_B]
    assert text.startswith(EMPTY[:EMPTY.index("}\n")] + "\n")


def test_add_duplicate_mount_point():
    with pytest.raises(ValidationError):
        add_remote_share(DOTTED, RemoteShare(name="/mnt/a", remote_path="//nas/other"))


@pytest.mark.parametrize("share", [
    RemoteShare(name="mnt/relative", remote_path="//nas/b"),
    RemoteShare(name="/mnt/b", remote_path="nas/b"),
    RemoteShare(name="/mnt/b", remote_path="//nas"),
    RemoteShare(name="/mnt/b; rm -rf /", remote_path="//nas/b"),
    RemoteShare(name="/mnt/b", remote_path="//nas/b", fs_type=""),
])
def test_add_rejects_invalid_share(share):
    with pytest.raises(ValidationError):
        add_remote_share(DOTTED, share)


def test_update_same_mount_point_keeps_position():
    changed = RemoteShare(name="/mnt/a", remote_path="//nas/renamed", force_user="1001")
    text = update_remote_share(DOTTED, "/mnt/a", changed)
    assert extract_remote_shares(text, "cifs") == [changed]
    assert text.endswith(DOTTED[DOTTED.index("\n\n  services.openssh"):])


def test_update_moves_mount_point():
    text = update_remote_share(DOTTED, "/mnt/a", RemoteShare(name="/mnt/c", remote_path="//nas/a"))
    assert [s.name for s in extract_remote_shares(text, "cifs")] == ["/mnt/c"]


def test_update_missing_entry():
    with pytest.raises(NotFoundError):
        update_remote_share(DOTTED, "/mnt/zzz", NAS_B)


def test_delete():
    text = delete_remote_share(DOTTED, "/mnt/a")
    assert extract_remote_shares(text, "cifs") == []
    assert "services.openssh.enable = true;" in text


def test_delete_nested_entry():
    text = delete_remote_share(add_remote_share(NESTED, NAS_B), "/mnt/b")
    assert text == NESTED
    assert '"/mnt/b"' not in text
    assert '"/" = {' in text


def test_delete_missing_entry():
    with pytest.raises(NotFoundError):
        delete_remote_share(DOTTED, "/mnt/zzz")


def test_manager_crud():
    source = TextConfigSource(EMPTY)
    manager = RemoteShareManager(source, fs_type="cifs")
    manager.create_share(NAS_B)
    assert manager.get_share("/mnt/b") == NAS_B
    manager.delete_share("/mnt/b")
    assert manager.list_shares() == []
    with pytest.raises(NotFoundError):
        manager.get_share("/mnt/b")
