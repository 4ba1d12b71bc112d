import logging
import shlex
import subprocess
from typing import Optional

from nixshares.config.settings import config
from nixshares.exceptions import ExternalCommandError

logger = logging.getLogger(__name__)


def rebuild_system(command: Optional[str] = None) -> str:
    """Apply the edited configuration with ``nixos-rebuild switch``.

    Blocks until the rebuild finishes and returns its output.
    """
    cmd = shlex.split(command or config.rebuild_command)
    logger.info(f"Running {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalCommandError(f"Failed to execute {cmd[0]}: {e}")

    if result.returncode != 0:
        logger.error(f"Rebuild failed with exit status {result.returncode}")
        raise ExternalCommandError(
            f"Rebuild failed: {result.stderr.strip() or result.stdout.strip()}",
            stderr=result.stderr,
            returncode=result.returncode,
        )
    return result.stdout
