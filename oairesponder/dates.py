import dataclasses
import datetime
import enum
import re

from dateutil import parser as dateutil_parser

from oairesponder import errors as oai_errors


class Granularity(enum.Enum):
    DAY = 'YYYY-MM-DD'
    SECOND = 'YYYY-MM-DDThh:mm:ssZ'

    def is_finer_than(self, other: 'Granularity') -> bool:
        return self is Granularity.SECOND and other is Granularity.DAY


_DAY_REGEX = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_SECOND_REGEX = re.compile(r'^\d{4}-\d{2}-\d{2}T([01]\d|2[0-3]):[0-5]\d:[0-5]\dZ$')


@dataclasses.dataclass(frozen=True)
class RequestDate:
    value: datetime.datetime  # always tz-aware, in UTC
    granularity: Granularity


def parse_request_date(argument_name: str, date_str: str) -> RequestDate:
    '''parse a `from` or `until` argument into a UTC datetime and its granularity

    >>> parse_request_date('from', '2012-02-12')
    RequestDate(value=datetime.datetime(2012, 2, 12, 0, 0, tzinfo=datetime.timezone.utc), granularity=<Granularity.DAY: 'YYYY-MM-DD'>)
    >>> parse_request_date('until', '2012-04-12T12:00:00Z').granularity
    <Granularity.SECOND: 'YYYY-MM-DDThh:mm:ssZ'>
    >>> parse_request_date('from', '2345-01-01T12:12:00+00')
    Traceback (most recent call last):
      ...
    oairesponder.errors.BadArgument: Expected YYYY-MM-DDThh:mm:ssZ or YYYY-MM-DD, found "2345-01-01T12:12:00+00" for argument: from
    >>> parse_request_date('from', '2345-31-12')
    Traceback (most recent call last):
      ...
    oairesponder.errors.BadArgument: Invalid date "2345-31-12" for argument: from
    '''
    if _SECOND_REGEX.match(date_str):
        _granularity = Granularity.SECOND
    elif _DAY_REGEX.match(date_str):
        _granularity = Granularity.DAY
    else:
        raise oai_errors.BadArgument(
            f'Expected {Granularity.SECOND.value} or {Granularity.DAY.value}, found "{date_str}" for',
            argument_name,
        )
    try:
        _parsed = dateutil_parser.isoparse(date_str)
    except ValueError:
        raise oai_errors.BadArgument(f'Invalid date "{date_str}" for', argument_name)
    if _parsed.tzinfo is None:
        _parsed = _parsed.replace(tzinfo=datetime.UTC)
    return RequestDate(_parsed.astimezone(datetime.UTC), _granularity)
