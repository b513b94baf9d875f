"""
Cloud provider adapters.
"""

from .base import ResourceGroupProvider
from .azure import AzureResourceGroupProvider

__all__ = [
    "ResourceGroupProvider",
    "AzureResourceGroupProvider",
]
