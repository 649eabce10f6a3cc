import abc
import datetime
import typing

from oairesponder.dates import Granularity
from oairesponder.models import Identity, MetadataFormat, Record, RecordList, SetList


class OAIRepository(abc.ABC):
    '''the data source behind an OAI-PMH responder

    implementations signal protocol errors by raising the matching
    `oairesponder.errors.OAIError` subclass (e.g. `BadRecordID`, `BadResumptionToken`);
    anything else they raise is reported as `badArgument`
    '''

    @abc.abstractmethod
    def identify(self) -> Identity:
        raise NotImplementedError(f'pls implement identify on {self.__class__.__qualname__}')

    def get_base_url(self) -> str:
        return self.identify().base_url

    def get_granularity(self) -> Granularity:
        return self.identify().granularity

    @abc.abstractmethod
    def list_metadata_formats(self, identifier: str | None = None) -> typing.Sequence[MetadataFormat]:
        raise NotImplementedError(f'''
            pls implement list_metadata_formats on {self.__class__.__qualname__}
            to return the formats available for the given item (or, without
            an identifier, for the whole repository) -- raise BadRecordID
            for unknown identifiers
        ''')

    @abc.abstractmethod
    def list_sets(self) -> SetList:
        raise NotImplementedError(f'''
            pls implement list_sets on {self.__class__.__qualname__}
            to return the first page of sets (empty if sets are not supported)
        ''')

    @abc.abstractmethod
    def list_sets_by_token(self, token: str) -> SetList:
        raise NotImplementedError(f'''
            pls implement list_sets_by_token on {self.__class__.__qualname__}
            to return the page of sets the token points at
        ''')

    @abc.abstractmethod
    def get_record(self, metadata_prefix: str, identifier: str) -> Record:
        raise NotImplementedError(f'''
            pls implement get_record on {self.__class__.__qualname__}
            to return the record in the requested format -- raise BadRecordID
            or BadFormat when it cannot
        ''')

    @abc.abstractmethod
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
        raise NotImplementedError(f'''
            pls implement list_records on {self.__class__.__qualname__}
            to return one page of records matching the given filters
            (from/until inclusive), with a resumption token while more remain
        ''')

    @abc.abstractmethod
    def list_records_by_token(self, token: str) -> RecordList:
        raise NotImplementedError(f'''
            pls implement list_records_by_token on {self.__class__.__qualname__}
            to return the page of records the token points at
        ''')
