"""
Shared building blocks for module models.
"""

from lab_recruitment.modules.shared.models import BaseModel

__all__ = ["BaseModel"]
