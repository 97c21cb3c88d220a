from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field

ParamValue = Union[str, int, float, bool, None, list, dict]


class Event(BaseModel):
    """
    A named analytics event with its parameter map.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain structure sent on the wire: {"name": ..., "params": {...}}.
        """
        return {"name": self.name, "params": dict(self.params)}


class UserProperty(BaseModel):
    """
    A user-scoped property attached to every request of a collector.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    value: ParamValue
