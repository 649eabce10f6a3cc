from collections.abc import Iterable, Sequence
import datetime
import logging
from typing import TypeVar

from oairesponder import errors as oai_errors
from oairesponder.models import Identity, MetadataFormat, OAISet, Record, RecordList, ResultList, SetList
from oairesponder.repository import OAIRepository
from oairesponder.tokens import DEFAULT_LIMIT, JsonResumptionToken


logger = logging.getLogger(__name__)


class InMemoryRepository(OAIRepository):
    '''an OAIRepository holding everything in memory

    records are added per metadata format, so one identifier may have a
    different `Record` (different metadata) for each format it supports.
    paging is stateless: each resumption token is a `JsonResumptionToken`.
    record pages are as big as the caller's `limit`; set pages use `page_size`
    '''

    def __init__(
        self,
        identity: Identity,
        formats: Iterable[MetadataFormat] = (),
        sets: Iterable[OAISet] = (),
        page_size: int = DEFAULT_LIMIT,
    ):
        self._identity = identity
        self._formats = tuple(formats)
        self._sets = tuple(sets)
        self.page_size = page_size
        # identifier => metadataPrefix => record (dicts keep insertion order)
        self._records: dict[str, dict[str, Record]] = {}

    def add_record(self, record: Record, metadata_prefix: str) -> None:
        if not any(_format.prefix == metadata_prefix for _format in self._formats):
            raise ValueError(f'unknown metadataPrefix: {metadata_prefix}')
        self._records.setdefault(record.header.identifier, {})[metadata_prefix] = record

    # abstract method from OAIRepository
    def identify(self) -> Identity:
        return self._identity

    # abstract method from OAIRepository
    def list_metadata_formats(self, identifier: str | None = None) -> Sequence[MetadataFormat]:
        if identifier is None:
            return self._formats
        _prefixes = self._get_formats_for(identifier)
        return tuple(
            _format
            for _format in self._formats
            if _format.prefix in _prefixes
        )

    # abstract method from OAIRepository
    def list_sets(self) -> SetList:
        return self._set_page(JsonResumptionToken(limit=self.page_size))

    # abstract method from OAIRepository
    def list_sets_by_token(self, token: str) -> SetList:
        return self._set_page(JsonResumptionToken.decode(token))

    # abstract method from OAIRepository
    def get_record(self, metadata_prefix: str, identifier: str) -> Record:
        try:
            return self._get_formats_for(identifier)[metadata_prefix]
        except KeyError:
            raise oai_errors.BadFormat(metadata_prefix)

    # abstract method from OAIRepository
    def list_records(
        self,
        *,
        limit: int,
        offset: int,
        metadata_prefix: str | None,
        from_: datetime.datetime | None = None,
        until: datetime.datetime | None = None,
        set_spec: str | None = None,
    ) -> RecordList:
        return self._record_page(JsonResumptionToken(
            offset=offset,
            limit=limit,
            from_=from_,
            until=until,
            metadata_prefix=metadata_prefix,
            set_spec=set_spec,
        ))

    # abstract method from OAIRepository
    def list_records_by_token(self, token: str) -> RecordList:
        _token = JsonResumptionToken.decode(token)
        if not _token.metadata_prefix:
            raise oai_errors.BadResumptionToken(token, 'Token without metadataPrefix')
        return self._record_page(_token)

    def _get_formats_for(self, identifier: str) -> dict[str, Record]:
        try:
            return self._records[identifier]
        except KeyError:
            raise oai_errors.BadRecordID(identifier)

    def _record_page(self, token: JsonResumptionToken) -> RecordList:
        _matching = [
            _formats[token.metadata_prefix]
            for _formats in self._records.values()
            if token.metadata_prefix in _formats
        ]
        _matching = [
            _record
            for _record in _matching
            if _in_range(_record.header.datestamp, token.from_, token.until)
            and (token.set_spec is None or _in_set(_record.header.set_specs, token.set_spec))
        ]
        return _paginate(_matching, token)

    def _set_page(self, token: JsonResumptionToken) -> SetList:
        return _paginate(self._sets, token)


T = TypeVar('T')


def _paginate(items: Sequence[T], token: JsonResumptionToken) -> ResultList[T]:
    _page = tuple(items[token.offset:token.offset + token.limit])
    _has_more = token.offset + token.limit < len(items)
    logger.debug('page at %s: %s of %s items', token.offset, len(_page), len(items))
    return ResultList(
        items=_page,
        resumption_token=(token.next_page().encode() if _has_more else None),
        complete_list_size=len(items),
        cursor=token.offset,
    )


def _aware(dt: datetime.datetime) -> datetime.datetime:
    return dt.replace(tzinfo=datetime.UTC) if dt.tzinfo is None else dt


def _in_range(datestamp, from_, until) -> bool:
    _datestamp = _aware(datestamp)
    if from_ is not None and _datestamp < _aware(from_):
        return False
    if until is not None and _datestamp > _aware(until):
        return False
    return True


def _in_set(set_specs: Iterable[str], set_spec: str) -> bool:
    '''
    >>> _in_set(['a:b'], 'a')
    True
    >>> _in_set(['ab'], 'a')
    False
    >>> _in_set(['a'], 'a:b')
    False
    '''
    return any(
        _spec == set_spec or _spec.startswith(f'{set_spec}:')
        for _spec in set_specs
    )
