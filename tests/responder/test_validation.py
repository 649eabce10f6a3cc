import datetime

import pytest

from oairesponder import errors as oai_errors
from oairesponder.dates import Granularity
from oairesponder.models import ListQuery, RequestParameters
from oairesponder.validation import run_checks, validate_get_record, validate_list_query
from oairesponder.verbs import VERBS, OAIVerb


def request(**kwargs):
    return RequestParameters.from_mapping(kwargs)


class TestOAIVerb:

    @pytest.mark.parametrize('verb_name', list(VERBS))
    def test_from_request(self, verb_name):
        assert OAIVerb.from_request(request(verb=verb_name)) is VERBS[verb_name]

    @pytest.mark.parametrize('params, message', [
        ({}, 'Missing OAI verb'),
        ({'verb': 'identify'}, 'Illegal OAI verb: identify'),
        ({'verb': ['Identify', 'Identify']}, 'Multiple OAI verbs: Identify, Identify'),
    ])
    def test_bad_verb(self, params, message):
        with pytest.raises(oai_errors.BadVerb) as excinfo:
            OAIVerb.from_request(RequestParameters.from_mapping(params))
        assert excinfo.value.code == 'badVerb'
        assert excinfo.value.description == message

    def test_allowed(self):
        assert VERBS['Identify'].allowed == frozenset()
        assert VERBS['ListSets'].allowed == {'resumptionToken'}
        assert VERBS['GetRecord'].allowed == {'identifier', 'metadataPrefix'}
        assert VERBS['ListRecords'].allowed == {'metadataPrefix', 'from', 'until', 'set', 'resumptionToken'}
        assert VERBS['ListIdentifiers'].allowed == VERBS['ListRecords'].allowed

    def test_verbs_closed(self):
        with pytest.raises(TypeError):
            VERBS['Frobnicate'] = OAIVerb('Frobnicate')

    @pytest.mark.parametrize('params', [
        {'verb': 'Identify'},
        {'verb': 'ListMetadataFormats', 'identifier': 'a'},
        {'verb': 'ListSets', 'resumptionToken': 'a'},
        {'verb': 'ListRecords', 'metadataPrefix': 'oai_dc', 'from': '2012-01-01', 'set': 'a'},
        {'verb': 'ListIdentifiers', 'resumptionToken': 'a'},
        # missing required arguments are checked later
        {'verb': 'GetRecord'},
    ])
    def test_valid_argument_names(self, params):
        _request = RequestParameters.from_mapping(params)
        OAIVerb.from_request(_request).validate_argument_names(_request)

    def test_illegal_arguments_in_order(self):
        _request = request(verb='Identify', zzz='1', aaa='2', mmm='3')
        with pytest.raises(oai_errors.OAIErrorList) as excinfo:
            VERBS['Identify'].validate_argument_names(_request)
        assert [_error.description for _error in excinfo.value] == [
            'Illegal argument: zzz',
            'Illegal argument: aaa',
            'Illegal argument: mmm',
        ]

    def test_exclusive(self):
        _request = request(verb='ListIdentifiers', resumptionToken='a', set='b')
        with pytest.raises(oai_errors.OAIErrorList) as excinfo:
            VERBS['ListIdentifiers'].validate_argument_names(_request)
        assert [_error.description for _error in excinfo.value] == ['Exclusive argument: resumptionToken']

    def test_is_resuming(self):
        assert VERBS['ListSets'].is_resuming(request(verb='ListSets', resumptionToken='a'))
        assert not VERBS['ListSets'].is_resuming(request(verb='ListSets'))
        assert not VERBS['GetRecord'].is_resuming(request(verb='GetRecord', resumptionToken='a'))


class TestRunChecks:

    def test_no_errors(self):
        run_checks([lambda: None, lambda: None])

    def test_all_checks_run(self):
        _ran = []

        def _check_raises():
            _ran.append('raises')
            raise oai_errors.BadRecordID('x')

        def _check_returns():
            _ran.append('returns')
            return oai_errors.BadFormat('y')

        def _check_passes():
            _ran.append('passes')

        with pytest.raises(oai_errors.OAIErrorList) as excinfo:
            run_checks([_check_raises, _check_passes, _check_returns])
        assert _ran == ['raises', 'passes', 'returns']
        assert [_error.code for _error in excinfo.value] == ['idDoesNotExist', 'cannotDisseminateFormat']

    def test_other_exceptions_propagate(self):
        def _check():
            raise RuntimeError('boom')
        with pytest.raises(RuntimeError):
            run_checks([_check])


class TestValidateRequests:

    def test_get_record(self, repository):
        assert validate_get_record(
            request(verb='GetRecord', identifier='a', metadataPrefix='olac'),
            repository,
        ) == ('olac', 'a')

    def test_list_query(self, repository):
        _query = validate_list_query(
            request(verb='ListRecords', metadataPrefix='oai_dc', set='a', **{'from': '2012-01-01T10:00:00Z'}),
            repository,
        )
        assert _query == ListQuery(
            metadata_prefix='oai_dc',
            from_=datetime.datetime(2012, 1, 1, 10, tzinfo=datetime.UTC),
            set_spec='a',
        )

    def test_list_query_equal_dates(self, repository):
        _query = validate_list_query(
            request(verb='ListRecords', metadataPrefix='oai_dc', until='2012-01-01', **{'from': '2012-01-01'}),
            repository,
        )
        assert _query.from_ == _query.until

    def test_day_granularity_always_supported(self, repository):
        repository.granularity = Granularity.DAY
        _query = validate_list_query(
            request(verb='ListRecords', metadataPrefix='oai_dc', until='2012-01-01'),
            repository,
        )
        assert _query.until == datetime.datetime(2012, 1, 1, tzinfo=datetime.UTC)

    def test_both_dates_too_fine(self, repository):
        repository.granularity = Granularity.DAY
        with pytest.raises(oai_errors.OAIErrorList) as excinfo:
            validate_list_query(
                request(verb='ListRecords', metadataPrefix='oai_dc', until='2012-01-02T00:00:00Z', **{'from': '2012-01-01T00:00:00Z'}),
                repository,
            )
        assert [_error.description for _error in excinfo.value] == [
            'The granularity of the `from` argument is not supported by this repository',
            'The granularity of the `until` argument is not supported by this repository',
        ]

    def test_bad_date_and_prefix(self, repository):
        with pytest.raises(oai_errors.OAIErrorList) as excinfo:
            validate_list_query(
                request(verb='ListRecords', metadataPrefix='nope', **{'from': '2012-13-01'}),
                repository,
            )
        assert [_error.description for _error in excinfo.value] == [
            'Invalid date "2012-13-01" for argument: from',
            'Invalid metadataPrefix: nope',
        ]
