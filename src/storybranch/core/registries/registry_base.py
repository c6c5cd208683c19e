from __future__ import annotations

from typing import Dict, Generic, Iterable, Optional, TypeVar

from pydantic import BaseModel, Field

from storybranch.errors import NotFoundError, ValidationError

T = TypeVar("T")


class NameRegistry(BaseModel, Generic[T]):
    kind: str = "item"
    items: Dict[str, T] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    def register(self, name: str, item: T) -> None:
        if name in self.items:
            raise ValidationError(f"Duplicate {self.kind} registration: {name}")
        self.items[name] = item

    def get(self, name: str) -> T:
        if name not in self.items:
            raise NotFoundError(self.kind, name, sorted(self.items.keys()))
        return self.items[name]

    def find(self, name: str) -> Optional[T]:
        return self.items.get(name)

    def remove(self, name: str) -> bool:
        return self.items.pop(name, None) is not None

    def all(self) -> Iterable[T]:
        return self.items.values()

    def names(self) -> Iterable[str]:
        return sorted(self.items.keys())

    def __contains__(self, name: object) -> bool:
        return name in self.items

    def __len__(self) -> int:
        return len(self.items)
