from __future__ import annotations

from collections import OrderedDict
from typing import (
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Protocol,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from ..errors import InvalidDescriptorError, MalformedResponseError
from ..log import get_logger
from .base import MetricDescriptor

logger = get_logger(__name__)


class JSONSource(Protocol):
    async def get_json(self, path: str) -> Any:
        ...


class Record(Protocol):
    identifier: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Record":
        ...

    def to_dict(self) -> Dict[str, Any]:
        ...


RecordT = TypeVar("RecordT", bound=Record)


class Collection(Generic[RecordT]):
    """Ordered set of records populated from a JSON endpoint.

    Subclasses bind ``model`` and ``url``; ``parse`` shapes the decoded
    response before one record is built per entry.
    """

    model: ClassVar[Type[Any]]
    url: ClassVar[str]

    def __init__(self, records: Iterable[Union[RecordT, Mapping[str, Any]]] = ()) -> None:
        self._records: "OrderedDict[str, RecordT]" = OrderedDict()
        self.rejected: List[Tuple[Any, str]] = []
        for record in records:
            self.add(record)

    def parse(self, response: Any) -> Any:
        return response

    def add(self, record: Union[RecordT, Mapping[str, Any]]) -> RecordT:
        if not isinstance(record, self.model):
            record = self.model.from_payload(record)
        self._records[record.identifier] = record
        return record

    def get(self, identifier: str) -> RecordT:
        if identifier not in self._records:
            raise KeyError(f"Record '{identifier}' is not in the collection.")
        return self._records[identifier]

    def all(self) -> List[RecordT]:
        return list(self._records.values())

    def reset(self, records: Iterable[Union[RecordT, Mapping[str, Any]]] = ()) -> None:
        self._records.clear()
        self.rejected.clear()
        for record in records:
            self.add(record)

    def to_list(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self._records.values()]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._records.values()))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._records

    async def fetch(self, client: JSONSource) -> List[RecordT]:
        response = await client.get_json(self.url)
        entries = self.parse(response)
        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Sequence):
            raise MalformedResponseError(
                f"{self.url} did not yield a sequence of entries "
                f"(got {type(entries).__name__})."
            )

        built: List[RecordT] = []
        seen = set()
        for entry in entries:
            try:
                record = self.model.from_payload(entry)
            except InvalidDescriptorError as exc:
                logger.warning("Rejected entry from %s: %s", self.url, exc)
                self.rejected.append((entry, str(exc)))
                continue
            if record.identifier in seen:
                reason = f"duplicate identifier '{record.identifier}'"
                logger.warning("Rejected entry from %s: %s", self.url, reason)
                self.rejected.append((entry, reason))
                continue
            seen.add(record.identifier)
            built.append(record)

        for record in built:
            self._records[record.identifier] = record
        logger.info(
            "Fetched %d records from %s (%d rejected)",
            len(built),
            self.url,
            len(entries) - len(built),
        )
        return built


class MetricDescriptorCollection(Collection[MetricDescriptor]):
    """Descriptors of the statistics figures the server knows about."""

    model = MetricDescriptor
    url = "/_admin/statistics-description"

    def parse(self, response: Any) -> Any:
        return response

    def in_group(self, group: str) -> List[MetricDescriptor]:
        return [record for record in self._records.values() if record.group == group]

    def grouped(self) -> "OrderedDict[str | None, List[MetricDescriptor]]":
        groups: "OrderedDict[str | None, List[MetricDescriptor]]" = OrderedDict()
        for record in self._records.values():
            groups.setdefault(record.group, []).append(record)
        return groups


StatisticsDescriptionCollection = MetricDescriptorCollection
