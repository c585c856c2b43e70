"""State tag handed to the rendering surface."""

from typing import Any, Literal, Optional

from pydantic import BaseModel


class DashboardState(BaseModel):
    """
    What a display surface shows: loading, an error message, or ready data.
    Errors cross this boundary only as a human-readable string.
    """

    state: Literal["loading", "error", "ready"]
    error: Optional[str] = None
    data: Optional[Any] = None

    @classmethod
    def loading(cls) -> "DashboardState":
        return cls(state="loading")

    @classmethod
    def failed(cls, exc: BaseException) -> "DashboardState":
        return cls(state="error", error=str(exc))

    @classmethod
    def ready(cls, data: BaseModel | dict | list) -> "DashboardState":
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        return cls(state="ready", data=data)
