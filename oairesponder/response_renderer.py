import collections
import copy
import dataclasses
import datetime
import http

from lxml import etree

from oairesponder.errors import OAIError
from oairesponder.models import MetadataContent, MetadataDocument, MetadataText, RequestParameters, ResultList
from oairesponder.util import OAI_SCHEMA_LOCATION, SubEl, format_datetime, ns, nsmap, xml_safe


@dataclasses.dataclass(frozen=True)
class OAIResponse:
    content: bytes
    status: int
    content_type: str

    @property
    def headers(self) -> dict[str, str]:
        return {'Content-Type': self.content_type}


class OAIResponseDocument:
    '''one OAI-PMH response: the tree, the errors in it, and the metadata waiting to go in
    '''
    CONTENT_TYPE = 'text/xml; charset=utf8'

    def __init__(self, response_date: datetime.datetime | None = None):
        self.root = etree.Element(
            ns('oai', 'OAI-PMH'),
            attrib={ns('xsi', 'schemaLocation'): OAI_SCHEMA_LOCATION},
            nsmap=nsmap('xsi', default='oai'),
        )
        SubEl(self.root, ns('oai', 'responseDate'), format_datetime(response_date or datetime.datetime.now(datetime.UTC)))
        self.request_element = SubEl(self.root, ns('oai', 'request'))
        self.errors: list[OAIError] = []
        # (placeholder, content) in creation order
        self._metadata_queue: collections.deque[tuple[etree._Element, MetadataContent]] = collections.deque()

    ###
    # building

    def element(self, tag_name: str, text: str | None = None, **attrib: str) -> etree._Element:
        _element = etree.Element(ns('oai', tag_name), **{
            _key: xml_safe(_value)
            for _key, _value in attrib.items()
        })
        if text:
            _element.text = xml_safe(text)
        return _element

    def sub_element(self, parent: etree._Element, tag_name: str, text: str | None = None, **attrib: str) -> etree._Element:
        return SubEl(parent, ns('oai', tag_name), text, **attrib)

    def content_element(self, parent: etree._Element, tag_name: str, content: MetadataContent | str) -> etree._Element:
        '''add an element holding either escaped text or a copy of an xml document
        '''
        _element = self.sub_element(parent, tag_name)
        _set_content(_element, content)
        return _element

    def metadata_placeholder(self, parent: etree._Element, content: MetadataContent) -> etree._Element:
        '''add an empty `metadata` element; its content goes in with `merge_metadata`
        '''
        _placeholder = self.sub_element(parent, 'metadata')
        self._metadata_queue.append((_placeholder, content))
        return _placeholder

    def resumption_token(self, parent: etree._Element, result_list: ResultList) -> etree._Element | None:
        # TODO: expirationDate, once repositories can report one
        if result_list.resumption_token:
            _token_element = self.sub_element(parent, 'resumptionToken', result_list.resumption_token)
        elif result_list.complete_list_size is not None or result_list.cursor is not None:
            # last page: empty token, but still tell the size
            _token_element = self.sub_element(parent, 'resumptionToken')
        else:
            return None
        if result_list.complete_list_size is not None:
            _token_element.set('completeListSize', str(result_list.complete_list_size))
        if result_list.cursor is not None:
            _token_element.set('cursor', str(result_list.cursor))
        return _token_element

    ###
    # assembling

    def set_request_url(self, base_url: str) -> None:
        self.request_element.text = xml_safe(base_url)

    def echo_request(self, request: RequestParameters) -> None:
        for _name, _value in request.items():
            self.request_element.set(_name, xml_safe(_value))

    def append(self, verb_element: etree._Element) -> None:
        self.root.append(verb_element)

    def add_error(self, error: OAIError) -> None:
        self.errors.append(error)
        SubEl(self.root, ns('oai', 'error'), error.description, code=error.code)

    def merge_metadata(self) -> None:
        # only placeholders made by `metadata_placeholder`, never `metadata`
        # elements that arrived inside imported content
        while self._metadata_queue:
            _placeholder, _content = self._metadata_queue.popleft()
            _set_content(_placeholder, _content)

    ###
    # output

    @property
    def status(self) -> int:
        return http.HTTPStatus.BAD_REQUEST if self.errors else http.HTTPStatus.OK

    def render(self) -> bytes:
        return etree.tostring(self.root, encoding='utf-8', xml_declaration=True, pretty_print=True)

    def as_response(self) -> OAIResponse:
        return OAIResponse(
            content=self.render(),
            status=int(self.status),
            content_type=self.CONTENT_TYPE,
        )


def _set_content(element: etree._Element, content: MetadataContent | str) -> None:
    if isinstance(content, MetadataDocument):
        # the repository's own tree stays untouched
        element.append(_copy_element(content.element))
    elif isinstance(content, MetadataText):
        element.text = xml_safe(content.text)
    else:
        element.text = xml_safe(str(content))


def _copy_element(element: etree._Element) -> etree._Element:
    if isinstance(element, etree._ElementTree):
        element = element.getroot()
    return copy.deepcopy(element)
