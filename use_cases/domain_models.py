"""Read-only snapshots of server-owned resources."""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Type, TypeVar

T = TypeVar("T")


def _from_mapping(cls: Type[T], raw: Mapping[str, Any]) -> T:
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in raw.items() if k in known})


@dataclass(frozen=True)
class Blog:
    id: int
    title: str = ""
    slug: str = ""
    subheading: str = ""
    tldr: str = ""
    content: str = ""
    image: str = ""
    estimated_read_time: int = 0
    created_at: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Blog":
        return _from_mapping(cls, raw)

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload.pop("id")
        payload.pop("created_at")
        return payload


@dataclass(frozen=True)
class Comment:
    id: int
    blog: int
    name: str = ""
    content: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Comment":
        return _from_mapping(cls, raw)


@dataclass(frozen=True)
class Feedback:
    id: int
    blog: int
    rating: int = 0
    email: str = ""
    message: str = ""
    submitted_at: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Feedback":
        return _from_mapping(cls, raw)


@dataclass(frozen=True)
class Story:
    id: int
    story_text: str = ""
    allow_publish: bool = False
    submitted_at: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Story":
        return _from_mapping(cls, raw)
