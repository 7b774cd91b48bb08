from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FeatureDescriptor:
    identifier: str
    label: str


@dataclass(frozen=True)
class AppCatalogEntry:
    package_id: str


FEATURES: Tuple[FeatureDescriptor, ...] = (
    FeatureDescriptor("Microsoft-Hyper-V-All", "Hyper-V"),
    FeatureDescriptor("Microsoft-Windows-Subsystem-Linux", "Windows Subsystem for Linux"),
    FeatureDescriptor("VirtualMachinePlatform", "Virtual Machine Platform"),
)

APPS: Tuple[AppCatalogEntry, ...] = tuple(
    AppCatalogEntry(p)
    for p in (
        "Git.Git",
        "Microsoft.WindowsTerminal",
        "Microsoft.PowerShell",
        "Microsoft.VisualStudioCode",
        "Docker.DockerDesktop",
        "Python.Python.3.12",
        "OpenJS.NodeJS.LTS",
        "GitHub.cli",
        "7zip.7zip",
    )
)

DISTRIBUTION = "Debian"
WSL_DEFAULT_VERSION = 2
TASK_NAME = "ResumeWSLSetupTask"

# Manual hardening advice only; nothing edits the hosts file.
TUNNEL_DOMAINS: Tuple[str, ...] = (
    "global.rel.tunnels.api.visualstudio.com",
    "tunnels.api.visualstudio.com",
)
