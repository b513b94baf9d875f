"""
rgsweep - Tag-driven cleanup of Azure resource groups.

This package provides a CLI and a small library that enumerates the
resource groups of a subscription, decides which ones to keep based on a
retention tag and an exclusion list, and deletes the rest.
"""

__version__ = "0.1.0"
__author__ = "rgsweep maintainers"
