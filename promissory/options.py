from __future__ import annotations

import os
from dataclasses import dataclass, field


def _warn_unhandled_from_env() -> bool:
    return os.getenv("PROMISSORY_WARN_UNHANDLED", "").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Options:
    warn_unhandled: bool = field(default_factory=_warn_unhandled_from_env)
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.warn_unhandled, bool):
            msg = f"warn_unhandled must be `bool`, got {type(self.warn_unhandled).__name__}"
            raise TypeError(msg)

        if self.name is not None and not isinstance(self.name, str):
            msg = f"name must be `str | None`, got {type(self.name).__name__}"
            raise TypeError(msg)

    def merge(
        self,
        *,
        warn_unhandled: bool | None = None,
        name: str | None = None,
    ) -> Options:
        return Options(
            warn_unhandled=warn_unhandled if warn_unhandled is not None else self.warn_unhandled,
            name=name if name is not None else self.name,
        )
