import grp
import pwd
from typing import List


def get_system_users() -> List[str]:
    """Names from the passwd database, sorted."""
    users = sorted({entry.pw_name for entry in pwd.getpwall()})
    return users or ["root", "nobody"]


def get_system_groups() -> List[str]:
    """Names from the group database, sorted."""
    groups = sorted({entry.gr_name for entry in grp.getgrall()})
    return groups or ["root", "nogroup"]
