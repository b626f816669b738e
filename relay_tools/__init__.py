"""Relay Tool System."""

from relay_tools.base import Tool, ToolMetadata, describe_tool
from relay_tools.registry import ToolRegistry

__all__ = ["Tool", "ToolMetadata", "ToolRegistry", "describe_tool"]
