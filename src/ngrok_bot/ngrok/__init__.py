"""ngrok process supervision and tunnel discovery."""

from .args import build_args
from .discovery import TunnelDiscoveryClient
from .models import TunnelInfo
from .process import NgrokProcess

__all__ = [
    "build_args",
    "NgrokProcess",
    "TunnelDiscoveryClient",
    "TunnelInfo",
]
