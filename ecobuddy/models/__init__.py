"""
Models Package

Exports all models for easy importing.
"""

from ecobuddy.models.user import User
from ecobuddy.models.facility import Facility, Category
from ecobuddy.models.status import FacilityStatus

__all__ = ['User', 'Facility', 'Category', 'FacilityStatus']
