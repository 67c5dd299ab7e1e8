"""
Pydantic schemas for API request/response models.
"""

from .journal import *
from .stats import *
