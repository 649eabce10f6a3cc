import datetime

import pytest

from oairesponder.dates import Granularity
from oairesponder.memory_repository import InMemoryRepository
from oairesponder.models import DeletedRecordPolicy, Header, Identity, MetadataText, OAISet, Record
from oairesponder.provider import OAIProvider

from tests.oai_fixtures import BASE_URL, OAI_DC, OLAC, FakeRepository


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def provider(repository):
    return OAIProvider(repository)


@pytest.fixture
def memory_identity():
    return Identity(
        repository_name='memoryRepo',
        base_url=BASE_URL,
        earliest_datestamp=datetime.datetime(2020, 1, 1, tzinfo=datetime.UTC),
        deleted_record=DeletedRecordPolicy.NO,
        granularity=Granularity.SECOND,
        admin_emails=('admin@example.com',),
    )


@pytest.fixture
def memory_repository(memory_identity):
    _repository = InMemoryRepository(
        memory_identity,
        formats=(OAI_DC, OLAC),
        sets=(OAISet('physics', 'Physics'), OAISet('physics:optics', 'Optics'), OAISet('math', 'Math')),
        page_size=2,
    )
    # seven records, one a day from 2020-01-01 12:00Z
    for _i in range(7):
        _record = Record(
            Header(
                f'oai:example.org:{_i}',
                datetime.datetime(2020, 1, 1 + _i, 12, 0, tzinfo=datetime.UTC),
                set_specs=(('physics:optics',) if _i % 2 else ('math',)),
            ),
            MetadataText(f'record {_i}'),
        )
        _repository.add_record(_record, 'oai_dc')
    _repository.add_record(
        Record(Header('oai:example.org:0', datetime.datetime(2020, 1, 1, 12, 0, tzinfo=datetime.UTC)), MetadataText('olac 0')),
        'olac',
    )
    return _repository
