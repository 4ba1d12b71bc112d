import os


class Config:
    nix_config_path = os.getenv("NIXSHARES_CONFIG_PATH", "/etc/nixos/customConfig/default.nix")
    remote_fs_type = os.getenv("NIXSHARES_REMOTE_FS_TYPE", "cifs")
    credentials_dir = os.getenv("NIXSHARES_CREDENTIALS_DIR", "/tmp")

    # Used when a fileSystems entry carries no uid=/gid= option
    default_uid = os.getenv("NIXSHARES_DEFAULT_UID", "1000")
    default_gid = os.getenv("NIXSHARES_DEFAULT_GID", "100")

    rebuild_command = os.getenv("NIXSHARES_REBUILD_COMMAND", "nixos-rebuild switch")
    log_level = os.getenv("NIXSHARES_LOG_LEVEL", "INFO")


config = Config()
