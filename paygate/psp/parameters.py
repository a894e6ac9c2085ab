"""
Parameter store for gateway requests and notifications.

Holds the field set of one operation (an outbound request or an inbound
notification). Each field remembers the channel it arrived on so a
snapshot can be restored faithfully.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple


class Channel(str, Enum):
    """Transport a parameter arrived on."""
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class Parameter:
    name: str
    value: str
    channel: Channel = Channel.GET


@dataclass(frozen=True)
class ParameterSnapshot:
    """Opaque, immutable copy of a parameter set."""
    parameters: Tuple[Parameter, ...]

    def __len__(self):
        return len(self.parameters)


class ParameterStore:
    """
    Name-unique collection of gateway parameters.

    Not thread-safe; each operation owns its own store.
    """

    def __init__(self, parameters: Optional[Iterable[Parameter]] = None):
        self._params: Dict[str, Parameter] = {}
        for param in parameters or ():
            self._params[param.name] = param

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any], channel: Channel = Channel.GET) -> "ParameterStore":
        store = cls()
        for name, value in fields.items():
            store.set(name, value, channel)
        return store

    def set(self, name: str, value: Any, channel: Channel = Channel.GET) -> None:
        """Insert or overwrite ``name``. ``None`` is stored as an empty string."""
        if not name:
            raise ValueError("Parameter name must not be empty")
        self._params[name] = Parameter(name, "" if value is None else str(value), Channel(channel))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        param = self._params.get(name)
        return param.value if param is not None else default

    def all(self) -> Tuple[Parameter, ...]:
        return tuple(self._params.values())

    def clear(self) -> None:
        self._params.clear()

    def snapshot(self) -> ParameterSnapshot:
        return ParameterSnapshot(self.all())

    def restore(self, snapshot: ParameterSnapshot) -> None:
        """Replace the current set with ``snapshot``, keeping each field's channel."""
        self.clear()
        for param in snapshot.parameters:
            self.set(param.name, param.value, param.channel)

    def as_dict(self) -> Dict[str, str]:
        return {p.name: p.value for p in self._params.values()}

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self.all())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterStore):
            return NotImplemented
        return self._params == other._params

    def __repr__(self):
        return f"<ParameterStore({', '.join(self._params)})>"
