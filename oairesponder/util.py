import datetime
import re
from typing import Any

from lxml import etree


XML_NAMESPACES = {
    'oai': 'http://www.openarchives.org/OAI/2.0/',
    'xsi': 'http://www.w3.org/2001/XMLSchema-instance',
    'xml': 'http://www.w3.org/XML/1998/namespace',
}

OAI_SCHEMA_LOCATION = 'http://www.openarchives.org/OAI/2.0/ http://www.openarchives.org/OAI/2.0/OAI-PMH.xsd'

UTC_DATETIME_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

# everything outside the XML 1.0 `Char` production
_NON_XML_CHARS = re.compile('[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')


def ns(namespace_prefix: str, tag_name: str) -> str:
    """format XML tag/attribute name with full namespace URI

    see https://lxml.de/tutorial.html#namespaces

    >>> ns('oai', 'record')
    '{http://www.openarchives.org/OAI/2.0/}record'
    """
    return f'{{{XML_NAMESPACES[namespace_prefix]}}}{tag_name}'


def nsmap(*namespace_prefixes: str, default: str | None = None) -> dict[str | None, str]:
    """build a namespace map suitable for lxml

    see https://lxml.de/tutorial.html#namespaces

    >>> nsmap('xsi', default='oai')
    {None: 'http://www.openarchives.org/OAI/2.0/', 'xsi': 'http://www.w3.org/2001/XMLSchema-instance'}
    """
    return {
        (None if (prefix == default) else prefix): uri
        for prefix, uri in XML_NAMESPACES.items()
        if (
            prefix in namespace_prefixes
            or prefix == default
        )
    }


def xml_safe(text: str) -> str:
    r"""replace characters XML cannot carry (NUL, most C0 controls, ...) with `\uXXXX`

    lxml refuses such strings outright; request arguments may hold anything

    >>> xml_safe('bad\x01name')
    'bad\\u0001name'
    >>> xml_safe('tab\tand ünïcode')
    'tab\tand ünïcode'
    """
    return _NON_XML_CHARS.sub(lambda match: f'\\u{ord(match.group()):04x}', text)


# wrapper for lxml.etree.SubElement, adds `text` kwarg for convenience
# (text and string attribute values go through `xml_safe`)
def SubEl(parent: etree._Element, tag_name: str, text: str | None = None, **kwargs: Any) -> etree._Element:
    element = etree.SubElement(parent, tag_name, **{
        _key: (xml_safe(_value) if isinstance(_value, str) else _value)
        for _key, _value in kwargs.items()
    })
    if text:
        element.text = xml_safe(text)
    return element


def format_datetime(dt: datetime.datetime | datetime.date) -> str:
    """format a datetime in UTC with 'Z' timezone indicator, as OAI-PMH requires

    https://www.openarchives.org/OAI/openarchivesprotocol.html#Dates
    (naive datetimes are taken to be UTC already; aware ones are converted)

    >>> format_datetime(datetime.datetime(2025, 1, 16, 15, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=1))))
    '2025-01-16T14:00:00Z'
    >>> format_datetime(datetime.datetime(2025, 1, 16, 15, 0))
    '2025-01-16T15:00:00Z'
    >>> format_datetime(datetime.date(2001, 12, 14))
    '2001-12-14T00:00:00Z'
    """
    if not isinstance(dt, datetime.datetime):
        dt = datetime.datetime(dt.year, dt.month, dt.day)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.UTC)
    return dt.astimezone(datetime.UTC).strftime(UTC_DATETIME_FORMAT)
