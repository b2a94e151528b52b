"""
Workspace access control: role-based permissions and subscription limits.
"""

__version__ = "0.1.0"
