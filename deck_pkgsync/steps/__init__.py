from .step_10_preflight import PreflightStep
from .step_20_disable_readonly import DisableReadonlyStep, EnableReadonlyStep
from .step_30_start_proxy import StartProxyStep, StopProxyStep
from .step_40_pre_hook import PreHookStep
from .step_50_install_packages import InstallPackagesStep
from .step_60_verify import VerifyInstallStep
from .step_70_post_hook import PostHookStep

__all__ = [
    "PreflightStep",
    "DisableReadonlyStep",
    "StartProxyStep",
    "PreHookStep",
    "InstallPackagesStep",
    "VerifyInstallStep",
    "PostHookStep",
    "StopProxyStep",
    "EnableReadonlyStep",
]
