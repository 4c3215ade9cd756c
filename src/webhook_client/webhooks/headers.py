"""Header lookup and the header storage policy."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class StoreHeadersMode(StrEnum):
    ALL = "all"
    NONE = "none"
    EXPLICIT = "explicit"


def find_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


@dataclass(frozen=True)
class HeaderStorage:
    """Which inbound headers get stored with a webhook call."""

    mode: StoreHeadersMode
    names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def all(cls) -> "HeaderStorage":
        return cls(StoreHeadersMode.ALL)

    @classmethod
    def none(cls) -> "HeaderStorage":
        return cls(StoreHeadersMode.NONE)

    @classmethod
    def explicit(cls, names: Iterable[str]) -> "HeaderStorage":
        lowered = frozenset(n.lower() for n in names)
        if not lowered:
            return cls.none()
        return cls(StoreHeadersMode.EXPLICIT, lowered)

    @classmethod
    def parse(cls, value: str | Iterable[str] | None) -> "HeaderStorage":
        """Parse the `store_headers` option: "*"/"ALL", "NONE", None or a list of names."""
        if value is None:
            return cls.none()
        if isinstance(value, str):
            token = value.strip().upper()
            if token in ("*", "ALL"):
                return cls.all()
            if token in ("", "NONE"):
                return cls.none()
            return cls.explicit([value])
        return cls.explicit(value)

    def filter(self, headers: Mapping[str, str]) -> dict[str, str]:
        if self.mode == StoreHeadersMode.ALL:
            return dict(headers)
        if self.mode == StoreHeadersMode.NONE:
            return {}
        return {k: v for k, v in headers.items() if k.lower() in self.names}
