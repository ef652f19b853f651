"""Bank configuration, read once at startup and immutable afterwards."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from reagent_bank.domain.exceptions import ValidationError

DEFAULT_PAGE_SIZE = 10
DEFAULT_LANE_WORKERS = 4


@dataclass(frozen=True)
class BankConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    account_wide: bool = False
    data_dir: Path = field(default_factory=lambda: Path("data"))
    lane_workers: int = DEFAULT_LANE_WORKERS
    locale: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.page_size, int) or self.page_size <= 0:
            raise ValidationError(f"Page size must be a positive integer, got {self.page_size!r}")
        if not isinstance(self.lane_workers, int) or self.lane_workers <= 0:
            raise ValidationError(
                f"Lane workers must be a positive integer, got {self.lane_workers!r}"
            )
