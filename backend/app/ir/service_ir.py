from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


def _field(record: Any, *names: str) -> Any:
    """
    Read the first present attribute / key out of a loose service record.
    Accepts dicts (raw JSON) and pydantic / dataclass objects alike.
    """
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def _string_list(value: Any) -> Tuple[str, ...]:
    # Anything that is not a list / tuple counts as "no entries"
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True)
class Service:
    id: str
    name: str = ""
    category: str = ""
    depends_on: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @classmethod
    def from_record(cls, record: Any) -> Optional["Service"]:
        """
        Build a Service from a partially-optional record.

        Returns None when the record carries no usable id; every other
        field falls back to an empty value.
        """
        raw_id = _field(record, "id")
        if not isinstance(raw_id, str) or not raw_id.strip():
            return None

        name = _field(record, "name")
        category = _field(record, "category")

        return cls(
            id=raw_id,
            name=name if isinstance(name, str) else "",
            category=category if isinstance(category, str) else "",
            depends_on=_string_list(_field(record, "depends_on", "dependsOn")),
        )
