from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Authenticated:
    user_id: str


@dataclass(frozen=True)
class Anonymous:
    pass


UserContext = Union[Authenticated, Anonymous]

ANONYMOUS = Anonymous()
