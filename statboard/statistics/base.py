from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple

from ..errors import InvalidDescriptorError


@dataclass(frozen=True)
class MetricDescriptor:
    """Schema of one statistics figure published by the server."""

    identifier: str
    name: Optional[str] = None
    description: Optional[str] = None
    group: Optional[str] = None
    units: Optional[str] = None
    type: Optional[str] = None  # e.g. current, accumulated, distribution
    cuts: Optional[Tuple[float, ...]] = None  # bucket bounds of distributions
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    FIELDS: ClassVar[Tuple[str, ...]] = (
        "identifier",
        "name",
        "description",
        "group",
        "units",
        "type",
        "cuts",
    )

    @classmethod
    def from_payload(cls, payload: Any) -> "MetricDescriptor":
        if not isinstance(payload, Mapping):
            raise InvalidDescriptorError(
                f"Descriptor entry must be a mapping, got {type(payload).__name__}."
            )
        identifier = payload.get("identifier")
        if not isinstance(identifier, str) or not identifier:
            raise InvalidDescriptorError("Descriptor entry has no identifier.")

        cuts = payload.get("cuts")
        if cuts is not None:
            if isinstance(cuts, (str, bytes)) or not isinstance(cuts, Sequence):
                raise InvalidDescriptorError(f"Descriptor '{identifier}' has invalid cuts.")
            if not all(isinstance(cut, Real) and not isinstance(cut, bool) for cut in cuts):
                raise InvalidDescriptorError(f"Descriptor '{identifier}' has invalid cuts.")
            cuts = tuple(cuts)

        known = {name: payload.get(name) for name in cls.FIELDS}
        known["cuts"] = cuts
        extra = {key: value for key, value in payload.items() if key not in cls.FIELDS}
        return cls(**known, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        for name in self.FIELDS:
            data[name] = getattr(self, name)
        if self.cuts is not None:
            data["cuts"] = list(self.cuts)
        return data
