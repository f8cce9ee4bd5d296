"""Bootstrap of AUR helpers on a plain pacman system.

paru and yay live in the AUR, so pacman cannot install them. They are
built from their AUR recipe with makepkg instead; once installed, the
helper becomes the active backend for the following installs.
"""

import logging
import tempfile
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

AUR_HELPERS = ('paru', 'paru-bin', 'yay', 'yay-bin')
AUR_URL = 'https://aur.archlinux.org/{name}.git'
BUILD_PREREQUISITES = ('base-devel', 'git')


def is_aur_helper(name: str) -> bool:
    return name in AUR_HELPERS


def bootstrap_aur_package(runner, name: str, sudo: Sequence[str] = ()):
    """Build and install one AUR package with makepkg.

    Args:
        runner: CommandRunner
        name: AUR package name
        sudo: Privilege escalation command for pacman

    Raises:
        BackendOperationFailure: if any step fails
    """
    logger.info("bootstrapping %s from the AUR", name)
    runner.run([*sudo, 'pacman', '-S', '--needed', '--noconfirm', *BUILD_PREREQUISITES])

    with tempfile.TemporaryDirectory(prefix='pm-bootstrap-') as tmpdir:
        build_dir = Path(tmpdir) / name
        runner.run(['git', 'clone', '--depth', '1', AUR_URL.format(name=name), str(build_dir)])
        # makepkg refuses to run as root and calls sudo itself
        runner.run(['makepkg', '--syncdeps', '--install', '--noconfirm'], cwd=build_dir)
