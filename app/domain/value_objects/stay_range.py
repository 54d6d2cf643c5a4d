"""Value Object StayRange - rango de fechas de una estadía."""

from dataclasses import dataclass
from datetime import date

from app.domain.errors import BadRequestError


@dataclass(frozen=True)
class StayRange:
    """
    Value Object inmutable que representa una estadía de check-in a check-out.

    Attributes:
        start: Fecha de check-in.
        end: Fecha de check-out (la noche del ``end`` no se cobra).
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise BadRequestError(f"start_date must be before end_date: {self.start} >= {self.end}")

    @property
    def nights(self) -> int:
        """Noches cobradas."""
        return (self.end - self.start).days

    def contains(self, other: "StayRange") -> bool:
        """Verifica si ``other`` cabe completo dentro de este rango."""
        return self.start <= other.start and other.end <= self.end

    def overlaps_with(self, other: "StayRange") -> bool:
        """Verifica si este rango se superpone con otro."""
        return self.start < other.end and other.start < self.end

    def total_price(self, price_per_night: int) -> int:
        """Precio total en unidades menores de la moneda."""
        return self.nights * price_per_night
