"""Locate the local Chrome executable for the host platform."""

import ntpath
import os
import platform
from typing import Mapping, Optional

from cnki_crawler.core.errors import PlatformUnsupported

LINUX_CHROME_PATH = "/usr/bin/google-chrome"
DARWIN_CHROME_PATH = "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"
WINDOWS_CHROME_SUFFIX = "Google/Chrome/Application/chrome.exe"

_X64_MACHINES = {"amd64", "x86_64", "x64"}


def resolve_browser_path(
    system: Optional[str] = None,
    machine: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Map the OS identity to the fixed Chrome install path.

    Args:
        system: OS name as reported by ``platform.system()``
        machine: CPU architecture as reported by ``platform.machine()``
        environ: Environment used to find Program Files on Windows

    Returns:
        Normalised path to the Chrome executable

    Raises:
        PlatformUnsupported: If the OS is not Windows, Linux or macOS
    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine
    environ = os.environ if environ is None else environ

    if system == "Windows":
        # Chrome is usually a 32-bit install, which lands in the x86 Program Files on 64-bit hosts
        if machine.lower() in _X64_MACHINES:
            program_files = environ.get("PROGRAMFILES(X86)") or environ.get("ProgramFiles(x86)")
        else:
            program_files = environ.get("PROGRAMFILES") or environ.get("ProgramFiles")
        if not program_files:
            raise PlatformUnsupported(system)
        return ntpath.normpath(ntpath.join(program_files, WINDOWS_CHROME_SUFFIX))

    if system == "Linux":
        return os.path.normpath(LINUX_CHROME_PATH)

    if system == "Darwin":
        return os.path.normpath(DARWIN_CHROME_PATH)

    raise PlatformUnsupported(system)


def browser_path_or_default(explicit: Optional[str] = None) -> str:
    """Return an explicit executable path, or the platform default."""
    if explicit:
        return os.path.normpath(explicit)
    return resolve_browser_path()
