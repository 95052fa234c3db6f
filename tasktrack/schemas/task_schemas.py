from typing import Annotated, Optional

from pydantic import BaseModel, StringConstraints, ValidationInfo, field_validator

from tasktrack.models.task_model import TaskStatus

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Description = Annotated[str, StringConstraints(max_length=DESCRIPTION_MAX_LENGTH)]


class TaskCreate(BaseModel):
    title: Title
    description: Optional[Description] = None
    # None means "use the default" (pending)
    status: Optional[TaskStatus] = None


class TaskUpdate(BaseModel):
    """Partial update. Only the fields present in the payload are applied."""

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "status")
    @classmethod
    def reject_explicit_null(cls, value, info: ValidationInfo):
        # runs only for keys actually present in the payload
        if value is None:
            raise ValueError(f"The {info.field_name} field is required.")
        return value

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
