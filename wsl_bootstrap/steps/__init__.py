from .step_00_preflight import PreflightStep
from .step_05_detect_resume import DetectResumeStep
from .step_10_enable_features import EnableFeaturesStep
from .step_20_reboot_if_needed import RebootIfNeededStep
from .step_30_wsl_default_version import WslDefaultVersionStep
from .step_40_install_distro import InstallDistroStep
from .step_50_install_apps import InstallAppsStep
from .step_90_cleanup import CleanupStep

__all__ = [
    "PreflightStep",
    "DetectResumeStep",
    "EnableFeaturesStep",
    "RebootIfNeededStep",
    "WslDefaultVersionStep",
    "InstallDistroStep",
    "InstallAppsStep",
    "CleanupStep",
]
