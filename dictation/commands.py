"""
Typed player commands and their dispatch onto the simulation.

Commands arrive already tokenized with typed parameters. execute() runs
one against a DictationSimulation and reports rejected input in the
result instead of raising, so a bad command never stops the game.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .simulation import DictationSimulation
from .errors import SimulationError


@dataclass
class InspectCommand:
    """Show a planet, optionally with its transfers to a second planet"""
    planet: str
    other: Optional[str] = None


@dataclass
class AdvanceCommand:
    """Advance the simulation a number of days"""
    days: Any


@dataclass
class TransferCommand:
    """Set up a continual annual transfer of one resource"""
    resource: str
    amount: Any
    source: str
    destination: str


Command = Union[InspectCommand, AdvanceCommand, TransferCommand]


@dataclass
class CommandResult:
    """Outcome of one command"""
    ok: bool
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None  # InvalidCommand, OutOfRangeParameter

    def to_dict(self) -> Dict[str, Any]:
        result = {'ok': self.ok, 'payload': self.payload}
        if self.error is not None:
            result['error'] = self.error
            result['error_kind'] = self.error_kind
        return result


def execute(sim: DictationSimulation, command: Command) -> CommandResult:
    """
    Run one command.

    Rejected commands leave the simulation untouched and come back with
    ok=False and the reason.
    """
    try:
        if isinstance(command, InspectCommand):
            payload = sim.inspect(command.planet, command.other)
        elif isinstance(command, AdvanceCommand):
            alive = sim.advance(command.days)
            payload = {'alive': alive, 'summary': sim.summarize().to_dict()}
            if sim.game_over:
                payload['final_report'] = sim.final_report().to_dict()
        elif isinstance(command, TransferCommand):
            transfer = sim.transfer(command.resource, command.amount, command.source, command.destination)
            payload = {'transfer': transfer.to_dict()}
        else:
            raise TypeError(f"Unsupported command: {command!r}")
    except SimulationError as e:
        return CommandResult(ok=False, error=str(e), error_kind=type(e).__name__)

    return CommandResult(ok=True, payload=payload)
