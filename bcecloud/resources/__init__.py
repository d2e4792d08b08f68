"""
BCE Cloud Python SDK - Resources

This module contains all service resource classes.
"""

from bcecloud.resources.base import AsyncBaseResource, BaseResource
from bcecloud.resources.bls import AsyncBlsResource, BlsResource
from bcecloud.resources.bos import AsyncBosResource, BosResource

__all__ = [
    "BaseResource",
    "AsyncBaseResource",
    "BosResource",
    "AsyncBosResource",
    "BlsResource",
    "AsyncBlsResource",
]
