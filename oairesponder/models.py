from __future__ import annotations
from collections.abc import Iterable, Iterator, Mapping
import dataclasses
import datetime
import enum
import types
from typing import Generic, Self, TypeVar

from lxml import etree

from oairesponder.dates import Granularity


class DeletedRecordPolicy(enum.Enum):
    NO = 'no'
    TRANSIENT = 'transient'
    PERSISTENT = 'persistent'


###
# metadata content: either text (escaped on output) or an xml document (imported as-is)

@dataclasses.dataclass(frozen=True)
class MetadataText:
    text: str

    def __str__(self) -> str:
        return self.text


@dataclasses.dataclass(frozen=True)
class MetadataDocument:
    element: etree._Element

    @classmethod
    def from_string(cls, xml: str | bytes) -> Self:
        if isinstance(xml, str):
            xml = xml.encode()
        return cls(etree.fromstring(xml, parser=etree.XMLParser(remove_blank_text=True)))


MetadataContent = MetadataText | MetadataDocument


###
# things a repository provides

@dataclasses.dataclass(frozen=True)
class Identity:
    repository_name: str
    base_url: str
    earliest_datestamp: datetime.datetime
    deleted_record: DeletedRecordPolicy
    granularity: Granularity
    admin_emails: tuple[str, ...] = ()
    compression: str | None = None
    description: MetadataContent | None = None


@dataclasses.dataclass(frozen=True)
class MetadataFormat:
    prefix: str
    schema: str
    namespace: str


@dataclasses.dataclass(frozen=True)
class Header:
    identifier: str
    datestamp: datetime.datetime
    set_specs: tuple[str, ...] = ()
    deleted: bool = False


@dataclasses.dataclass(frozen=True)
class Record:
    header: Header
    metadata: MetadataContent | None = None
    about: MetadataContent | None = None


@dataclasses.dataclass(frozen=True)
class OAISet:
    spec: str
    name: str
    description: MetadataContent | None = None


T = TypeVar('T')


@dataclasses.dataclass(frozen=True)
class ResultList(Generic[T]):
    items: tuple[T, ...]
    resumption_token: str | None = None
    complete_list_size: int | None = None
    cursor: int | None = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)


RecordList = ResultList[Record]
SetList = ResultList[OAISet]


###
# things built from a request

@dataclasses.dataclass(frozen=True)
class RequestParameters:
    '''request arguments as given, each name mapped to all its values (in order)

    >>> _params = RequestParameters.from_mapping({'verb': 'GetRecord', 'identifier': ['a', 'b']})
    >>> _params.verbs
    ('GetRecord',)
    >>> _params.argument_names
    ('identifier',)
    >>> _params.repeated_names
    ('identifier',)
    >>> _params.get('identifier')
    'a'
    >>> 'metadataPrefix' in _params
    False
    '''
    values: Mapping[str, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, params: Mapping[str, str | Iterable[str]]) -> Self:
        _values = {}
        for _name, _value in params.items():
            _values[_name] = (_value,) if isinstance(_value, str) else tuple(_value)
        return cls(types.MappingProxyType(_values))

    @property
    def verbs(self) -> tuple[str, ...]:
        return self.values.get('verb', ())

    @property
    def argument_names(self) -> tuple[str, ...]:
        return tuple(_name for _name in self.values if _name != 'verb')

    @property
    def repeated_names(self) -> tuple[str, ...]:
        return tuple(
            _name
            for _name in self.argument_names
            if len(self.values[_name]) > 1
        )

    def get(self, name: str) -> str | None:
        _values = self.values.get(name)
        return _values[0] if _values else None

    def items(self) -> Iterator[tuple[str, str]]:
        for _name, _values in self.values.items():
            if _values:
                yield _name, _values[0]

    def __contains__(self, name: object) -> bool:
        return bool(self.values.get(name))  # type: ignore[call-overload]


@dataclasses.dataclass(frozen=True)
class ListQuery:
    metadata_prefix: str
    from_: datetime.datetime | None = None
    until: datetime.datetime | None = None
    set_spec: str | None = None
