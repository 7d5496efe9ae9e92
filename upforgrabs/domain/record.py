"""
Record domain object for upforgrabs.

A Record is one project entry in the registry, loaded from a single
YAML file. It is immutable once loaded.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional, Dict, Any, Tuple, List


class RecordParseError(Exception):
    """Raised when a record file cannot be read as a YAML mapping."""
    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path
        self.message = message


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True)
class Record:
    """
    Immutable representation of one registry entry.

    Attributes:
        relative_path: Path of the file relative to the registry root,
            always with forward slashes. Identity within a run.
        site_url: The project's `site` value, if any
        label_link_url: The `upforgrabs.link` value
        label_name: The `upforgrabs.name` value
        tags: The `tags` sequence
        data: The raw parsed mapping, for schema validation
    """
    relative_path: str
    site_url: Optional[str] = None
    label_link_url: Optional[str] = None
    label_name: Optional[str] = None
    tags: Tuple[str, ...] = ()
    data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_mapping(cls, relative_path: str, data: Dict[str, Any]) -> 'Record':
        """Create a Record from a parsed YAML document."""
        upforgrabs = data.get('upforgrabs')
        if not isinstance(upforgrabs, dict):
            upforgrabs = {}

        tags = data.get('tags') or ()
        if not isinstance(tags, (list, tuple)):
            tags = ()

        return cls(
            relative_path=str(PurePosixPath(relative_path)),
            site_url=_text(data.get('site')),
            label_link_url=_text(upforgrabs.get('link')),
            label_name=_text(upforgrabs.get('name')),
            tags=tuple(str(t) for t in tags),
            data=data,
        )

    @property
    def file_name(self) -> str:
        return PurePosixPath(self.relative_path).name

    @property
    def stem(self) -> str:
        return PurePosixPath(self.relative_path).stem

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or empty."""
        missing = []
        if self.label_link_url is None:
            missing.append('upforgrabs.link')
        if self.label_name is None:
            missing.append('upforgrabs.name')
        return missing

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'path': self.relative_path,
            'site': self.site_url,
            'link': self.label_link_url,
            'label': self.label_name,
            'tags': list(self.tags),
        }
        return {k: v for k, v in result.items() if v is not None}
