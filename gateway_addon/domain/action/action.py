# gateway_addon/domain/action/action.py
import logging
from typing import Any, Dict, Optional

from gateway_addon.core.clock import timestamp
from gateway_addon.domain.action.enums import ActionStatus
from gateway_addon.domain.device.notifier import ActionNotifier

logger = logging.getLogger(__name__)


class Action:
    """A single requested action on a device.

    Whoever performs the work calls :meth:`start` and then :meth:`finish`,
    each exactly once. The device is notified on both transitions.
    """

    def __init__(self, action_id: str, device: ActionNotifier, name: str, input: Any = None):
        self._id = action_id
        self.device = device
        self._name = name
        self._input = input

        self.status: ActionStatus = ActionStatus.CREATED
        self._time_requested: str = timestamp()
        self.time_completed: Optional[str] = None

    def __repr__(self) -> str:
        return f"<Action id={self._id!r} name={self._name!r} status={self.status.value}>"

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def input(self) -> Any:
        return self._input

    @property
    def time_requested(self) -> str:
        return self._time_requested

    def describe(self) -> Dict[str, Any]:
        """Outward action description; ``input`` and ``timeCompleted`` only when set."""
        description: Dict[str, Any] = {
            "name": self._name,
            "timeRequested": self._time_requested,
            "status": self.status.value,
        }

        if self._input is not None:
            description["input"] = self._input

        if self.time_completed is not None:
            description["timeCompleted"] = self.time_completed

        return description

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "name": self._name,
            "input": self._input,
            "status": self.status.value,
            "timeRequested": self._time_requested,
            "timeCompleted": self.time_completed,
        }

    def start(self) -> None:
        if self.status != ActionStatus.CREATED:
            logger.warning(f"Action {self._id} ({self._name}): start() while {self.status.value}")

        self.status = ActionStatus.PENDING
        logger.info(f"Action {self._id} ({self._name}) pending")
        self.device.action_notify(self)

    def finish(self) -> None:
        if self.status != ActionStatus.PENDING:
            logger.warning(f"Action {self._id} ({self._name}): finish() while {self.status.value}")

        self.status = ActionStatus.COMPLETED
        self.time_completed = timestamp()
        logger.info(f"Action {self._id} ({self._name}) completed at {self.time_completed}")
        self.device.action_notify(self)
