"""
Status transition tables shared by the approval-style workflows.

Each entity keeps its own status vocabulary; a StateMachine only maps
(action, current status) to the next status and rejects everything else.
"""
from typing import Dict, FrozenSet, Iterable, Tuple

from gym_api.core.exceptions import InvalidStateError, ValidationError


class StateMachine:
    def __init__(self, entity: str, transitions: Dict[str, Tuple[Iterable[str], str]]):
        self.entity = entity
        self._transitions: Dict[str, Tuple[FrozenSet[str], str]] = {
            action: (frozenset(sources), target)
            for action, (sources, target) in transitions.items()
        }

    @property
    def actions(self) -> Tuple[str, ...]:
        return tuple(self._transitions)

    def allowed_from(self, action: str) -> FrozenSet[str]:
        return self._transitions[action][0]

    def next_status(self, action: str, current: str) -> str:
        """
        Raises:
            ValidationError: unknown action.
            InvalidStateError: action not permitted from `current`.
        """
        if action not in self._transitions:
            raise ValidationError(
                f"Unknown action '{action}' for {self.entity}",
                details={"allowed": list(self._transitions)}
            )
        sources, target = self._transitions[action]
        if current not in sources:
            raise InvalidStateError(
                f"Cannot {action} {self.entity.lower()} in status '{current}'",
                current_status=current
            )
        return target
