"""
pm - one command line for every package manager

Dispatches install, remove, upgrade, list and search to whichever
native package manager is present on the host:
- pacman and the paru/yay AUR helpers
- apt, dnf, zypper, apk
- brew, scoop
"""

__version__ = "0.3.0"
