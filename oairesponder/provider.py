from collections.abc import Iterable, Mapping
import logging

from lxml import etree

from oairesponder import errors as oai_errors
from oairesponder.models import Header, Record, RequestParameters, ResultList
from oairesponder.observers import NullObserver, OAIObserver
from oairesponder.repository import OAIRepository
from oairesponder.response_renderer import OAIResponse, OAIResponseDocument
from oairesponder.util import format_datetime
from oairesponder.validation import validate_get_record, validate_list_query
from oairesponder.verbs import OAIVerb


logger = logging.getLogger(__name__)


class OAIProvider:
    '''answers OAI-PMH requests from an `OAIRepository`

    `handle_request` takes the request arguments (values may be lists, as from
    a django QueryDict) and always returns a complete response document --
    errors included, as `<error>` elements with status 400
    '''
    PROTOCOL_VERSION = '2.0'
    PAGE_SIZE = 100

    def __init__(self, repository: OAIRepository, observer: OAIObserver | None = None):
        self.repository = repository
        self.observer = observer or NullObserver()

    def handle_request(self, params: RequestParameters | Mapping[str, str | Iterable[str]]) -> OAIResponse:
        _request = (
            params
            if isinstance(params, RequestParameters)
            else RequestParameters.from_mapping(params)
        )
        _document = OAIResponseDocument()
        try:
            _document.set_request_url(self.repository.get_base_url())
            _verb_element = self.dispatch(_request, _document)
        except Exception as _error:
            if not isinstance(_error, (oai_errors.OAIError, oai_errors.OAIErrorList)):
                logger.exception('Unexpected error handling OAI-PMH request %s', dict(_request.items()))
            for _oai_error in oai_errors.as_oai_errors(_error):
                self.observer.error_reported(_oai_error, _request)
                _document.add_error(_oai_error)
        else:
            # every argument is known good by now, safe to echo
            _document.echo_request(_request)
            _document.append(_verb_element)
            _document.merge_metadata()
        _response = _document.as_response()
        self.observer.request_handled(_request, _response.status)
        return _response

    def dispatch(self, request: RequestParameters, document: OAIResponseDocument) -> etree._Element:
        _verb = OAIVerb.from_request(request)
        _verb.validate_argument_names(request)
        handler_method = {
            'Identify': self._do_identify,
            'ListMetadataFormats': self._do_listmetadataformats,
            'ListSets': self._do_listsets,
            'ListIdentifiers': self._do_listidentifiers,
            'ListRecords': self._do_listrecords,
            'GetRecord': self._do_getrecord,
        }[_verb.name]
        return handler_method(_verb, request, document)

    ###
    # verbs

    def _do_identify(self, verb, request, document):
        _identity = self.repository.identify()
        _identify = document.element('Identify')
        document.sub_element(_identify, 'repositoryName', _identity.repository_name)
        document.sub_element(_identify, 'baseURL', self.repository.get_base_url())
        document.sub_element(_identify, 'protocolVersion', self.PROTOCOL_VERSION)
        for _email in _identity.admin_emails:
            document.sub_element(_identify, 'adminEmail', _email)
        document.sub_element(_identify, 'earliestDatestamp', format_datetime(_identity.earliest_datestamp))
        document.sub_element(_identify, 'deletedRecord', _identity.deleted_record.value)
        document.sub_element(_identify, 'granularity', _identity.granularity.value)
        if _identity.compression:
            document.sub_element(_identify, 'compression', _identity.compression)
        if _identity.description is not None:
            document.content_element(_identify, 'description', _identity.description)
        return _identify

    def _do_listmetadataformats(self, verb, request, document):
        _identifier = request.get('identifier')
        _formats = self.repository.list_metadata_formats(_identifier)
        if not _formats:
            raise oai_errors.NoMetadataFormats(_identifier)
        _list_formats = document.element('ListMetadataFormats')
        for _format in _formats:
            _metadata_format = document.sub_element(_list_formats, 'metadataFormat')
            document.sub_element(_metadata_format, 'metadataPrefix', _format.prefix)
            document.sub_element(_metadata_format, 'schema', _format.schema)
            document.sub_element(_metadata_format, 'metadataNamespace', _format.namespace)
        return _list_formats

    def _do_listsets(self, verb, request, document):
        if verb.is_resuming(request):
            _sets = self.repository.list_sets_by_token(request.get('resumptionToken'))
        else:
            _sets = self.repository.list_sets()
            if not _sets.items:
                raise oai_errors.NoSetHierarchy()
        _list_sets = document.element('ListSets')
        for _set in _sets:
            _set_element = document.sub_element(_list_sets, 'set')
            document.sub_element(_set_element, 'setSpec', _set.spec)
            document.sub_element(_set_element, 'setName', _set.name)
            if _set.description is not None:
                document.content_element(_set_element, 'setDescription', _set.description)
        document.resumption_token(_list_sets, _sets)
        return _list_sets

    def _do_listidentifiers(self, verb, request, document):
        _records = self._load_page(verb, request)
        _list_identifiers = document.element('ListIdentifiers')
        for _record in _records:
            _list_identifiers.append(self._header(_record.header, document))
        document.resumption_token(_list_identifiers, _records)
        return _list_identifiers

    def _do_listrecords(self, verb, request, document):
        _records = self._load_page(verb, request)
        _list_records = document.element('ListRecords')
        for _record in _records:
            _list_records.append(self._record(_record, document))
        document.resumption_token(_list_records, _records)
        return _list_records

    def _do_getrecord(self, verb, request, document):
        _metadata_prefix, _identifier = validate_get_record(request, self.repository)
        _record = self.repository.get_record(_metadata_prefix, _identifier)
        _get_record = document.element('GetRecord')
        _get_record.append(self._record(_record, document))
        return _get_record

    ###
    # helpers

    def _load_page(self, verb, request) -> ResultList[Record]:
        if verb.is_resuming(request):
            return self.repository.list_records_by_token(request.get('resumptionToken'))
        _query = validate_list_query(request, self.repository)
        _records = self.repository.list_records(
            limit=self.PAGE_SIZE,
            offset=0,
            metadata_prefix=_query.metadata_prefix,
            from_=_query.from_,
            until=_query.until,
            set_spec=_query.set_spec,
        )
        if not _records.items:
            # maybe a set was asked of a repository without any
            if _query.set_spec is not None and not self.repository.list_sets().items:
                raise oai_errors.NoSetHierarchy()
            raise oai_errors.NoResults()
        return _records

    def _header(self, header: Header, document: OAIResponseDocument) -> etree._Element:
        _header = document.element('header')
        if header.deleted:
            _header.set('status', 'deleted')
        document.sub_element(_header, 'identifier', header.identifier)
        document.sub_element(_header, 'datestamp', format_datetime(header.datestamp))
        for _set_spec in header.set_specs:
            document.sub_element(_header, 'setSpec', _set_spec)
        return _header

    def _record(self, record: Record, document: OAIResponseDocument) -> etree._Element:
        _record_element = document.element('record')
        _record_element.append(self._header(record.header, document))
        # deleted records keep only their header
        if not record.header.deleted:
            if record.metadata is not None:
                document.metadata_placeholder(_record_element, record.metadata)
            if record.about is not None:
                document.content_element(_record_element, 'about', record.about)
        return _record_element
