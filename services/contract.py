# services/contract.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union
from services.resolve import Verdict, resolve
from services.setup import SetupResult, validate_setup
from services.state import DrawState


@dataclass(frozen=True)
class Setup:
    state: DrawState


@dataclass(frozen=True)
class PerformDraw:
    state: DrawState
    blocks: Tuple[bytes, ...]
    claimant: str


Command = Union[Setup, PerformDraw]


def verify(command: Command) -> Union[SetupResult, Verdict]:
    """Одна точка входа для внешнего слоя: тип команды выбирает проверку."""
    if isinstance(command, Setup):
        return validate_setup(command.state)
    if isinstance(command, PerformDraw):
        return resolve(command.state, command.blocks, command.claimant)
    raise TypeError(f"unknown command: {type(command).__name__}")
