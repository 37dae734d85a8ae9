"""Person value shared by clients and users (embedded, not inherited)."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Person:
    first_name: str
    last_name: str
    email: str
    date_of_birth: Optional[date] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def age(self, on: Optional[date] = None) -> Optional[int]:
        """Age in whole calendar years on the given day (default: today)."""
        if self.date_of_birth is None:
            return None
        on = on or date.today()
        years = on.year - self.date_of_birth.year
        if (on.month, on.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years
