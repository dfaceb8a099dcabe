"""Generation progress event schema."""

from enum import Enum

from pydantic import BaseModel


class ProgressEventType(str, Enum):
    START = "start"
    STEP_PROGRESS = "step_progress"
    STEP_COMPLETE = "step_complete"
    COMPLETE = "complete"


class StepState(BaseModel):
    id: str
    name: str
    progress: int = 0
    status: str = "pending"


class ProgressEvent(BaseModel):
    """One message of a generation progress stream."""

    type: ProgressEventType
    project_id: str
    step_id: str | None = None
    step_name: str | None = None
    progress: int | None = None
    message: str | None = None
    steps: list[StepState] | None = None
    status: str | None = None
    run_id: str | None = None

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(exclude_none=True)}\n\n"

    @property
    def is_terminal(self) -> bool:
        return self.type == ProgressEventType.COMPLETE
