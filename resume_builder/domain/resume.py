"""Resume value types.

Plain dataclasses with lenient ``from_dict`` constructors: every field is
optional, missing or ``None`` values collapse to empty strings / lists.
No I/O here -- stores and renderers consume these values.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_TITLE = "My Resume"
DEFAULT_TEMPLATE_TYPE = "modern"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass
class PersonalInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PersonalInfo":
        data = _mapping(data)
        return cls(
            name=_text(data.get("name")),
            email=_text(data.get("email")),
            phone=_text(data.get("phone")),
            location=_text(data.get("location")),
            summary=_text(data.get("summary")),
        )


@dataclass
class Education:
    school: str = ""
    degree: str = ""
    year: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Education":
        data = _mapping(data)
        return cls(
            school=_text(data.get("school")),
            degree=_text(data.get("degree")),
            year=_text(data.get("year")),
        )


@dataclass
class Experience:
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Experience":
        data = _mapping(data)
        return cls(
            company=_text(data.get("company")),
            position=_text(data.get("position")),
            duration=_text(data.get("duration")),
            description=_text(data.get("description")),
        )


@dataclass
class Resume:
    """A resume document. ``id`` is set only once persisted."""

    title: str = ""
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    education: List[Education] = field(default_factory=list)
    experience: List[Experience] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    template_type: str = DEFAULT_TEMPLATE_TYPE
    id: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title.strip() or DEFAULT_TITLE

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Resume":
        data = _mapping(data)
        return cls(
            title=_text(data.get("title")),
            personal_info=PersonalInfo.from_dict(data.get("personal_info")),
            education=[Education.from_dict(item) for item in data.get("education") or []],
            experience=[Experience.from_dict(item) for item in data.get("experience") or []],
            skills=[_text(item) for item in data.get("skills") or [] if item is not None],
            template_type=_text(data.get("template_type")) or DEFAULT_TEMPLATE_TYPE,
            id=data.get("id") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
