"""
Managers for configuration and resource ownership
"""

from .config_manager import ConfigManager
from .resource_registry import ResourceRegistry, RegistrationResult

__all__ = ['ConfigManager', 'ResourceRegistry', 'RegistrationResult']
