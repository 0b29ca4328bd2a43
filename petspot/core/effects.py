"""
One-off outputs of the report flow (navigation, toasts, pickers).

Effects are kept apart from state: a form emits them into the flow's
EffectQueue and the UI drains the queue. Draining removes what it returns,
so each effect is handed out exactly once.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from petspot.core.flow_steps import FlowStep


@dataclass(frozen=True)
class NavigateToStep:
    step: FlowStep


@dataclass(frozen=True)
class NavigateBack:
    step: FlowStep


@dataclass(frozen=True)
class ExitFlow:
    pass


@dataclass(frozen=True)
class ShowToast:
    message: str
    actionLabel: Optional[str] = None


@dataclass(frozen=True)
class LaunchPhotoPicker:
    pass


@dataclass(frozen=True)
class OpenLocationSettings:
    pass


@dataclass(frozen=True)
class NavigateToSummary:
    managementPassword: str


@dataclass(frozen=True)
class DismissFlow:
    pass


class EffectQueue:
    def __init__(self):
        self._pending: List[object] = []
        self._listeners: List[Callable[[object], None]] = []

    def subscribe(self, listener: Callable[[object], None]) -> None:
        """Listeners see every effect as it is emitted (before it is drained)."""
        self._listeners.append(listener)

    def emit(self, effect) -> None:
        self._pending.append(effect)
        for listener in list(self._listeners):
            listener(effect)

    def drain(self) -> list:
        out, self._pending = self._pending, []
        return out

    def peek(self) -> tuple:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
