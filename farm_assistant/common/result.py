# farm_assistant/common/result.py
"""
Plain result values for boundaries where failure is expected input,
e.g. a report body that is not valid JSON.
"""
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[Any], Err]
