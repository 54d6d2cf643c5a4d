"""Value Objects del dominio."""

from app.domain.value_objects.stay_range import StayRange

__all__ = ["StayRange"]
