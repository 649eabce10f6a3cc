import base64
import binascii
import dataclasses
import datetime
import json
from typing import Self

from oairesponder import errors as oai_errors


DEFAULT_LIMIT = 100


@dataclasses.dataclass(frozen=True)
class JsonResumptionToken:
    '''a resumption token carrying its whole query: base64-encoded json

    (one way for a repository to stay stateless; the responder itself
    never looks inside resumption tokens)

    >>> _token = JsonResumptionToken(offset=100, metadata_prefix='oai_dc', set_spec='a:b')
    >>> JsonResumptionToken.decode(_token.encode()) == _token
    True
    >>> JsonResumptionToken.decode(_token.encode()).next_page().offset
    200
    >>> JsonResumptionToken.decode('not a token')
    Traceback (most recent call last):
      ...
    oairesponder.errors.BadResumptionToken: Failed to decode token, not valid base64: not a token
    '''
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    from_: datetime.datetime | None = None
    until: datetime.datetime | None = None
    metadata_prefix: str | None = None
    set_spec: str | None = None

    def __post_init__(self):
        if self.offset < 0 or self.limit < 1:
            raise ValueError(f'bad page: offset={self.offset}, limit={self.limit}')

    def encode(self) -> str:
        _token_data = {
            'offset': self.offset,
            'limit': self.limit,
            'from': _to_timestamp(self.from_),
            'until': _to_timestamp(self.until),
            'metadataPrefix': self.metadata_prefix,
            'set': self.set_spec,
        }
        return base64.b64encode(json.dumps(_token_data).encode()).decode()

    @classmethod
    def decode(cls, token: str) -> Self:
        try:
            _decoded = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError):
            raise oai_errors.BadResumptionToken(token, 'Failed to decode token, not valid base64')
        try:
            _token_data = json.loads(_decoded)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise oai_errors.BadResumptionToken(token, 'Failed to decode token, not valid json')
        if not isinstance(_token_data, dict):
            raise oai_errors.BadResumptionToken(token, 'Failed to decode token, not a json object')
        try:
            return cls(
                offset=_get_int(_token_data, 'offset', 0),
                limit=_get_int(_token_data, 'limit', DEFAULT_LIMIT),
                from_=_from_timestamp(_token_data.get('from')),
                until=_from_timestamp(_token_data.get('until')),
                metadata_prefix=_get_str(_token_data, 'metadataPrefix'),
                set_spec=_get_str(_token_data, 'set'),
            )
        except (TypeError, ValueError, OverflowError, OSError):
            raise oai_errors.BadResumptionToken(token, 'Failed to decode token, invalid values')

    def next_page(self) -> Self:
        return dataclasses.replace(self, offset=self.offset + self.limit)

    def __str__(self) -> str:
        return self.encode()


def _to_timestamp(dt: datetime.datetime | None) -> int | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.UTC)
    return int(dt.timestamp())


def _from_timestamp(timestamp) -> datetime.datetime | None:
    if timestamp is None:
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise TypeError(f'expected int timestamp, got {timestamp!r}')
    return datetime.datetime.fromtimestamp(timestamp, tz=datetime.UTC)


def _get_int(token_data: dict, key: str, default: int) -> int:
    _value = token_data.get(key)
    if _value is None:
        return default
    if isinstance(_value, bool) or not isinstance(_value, int) or _value < 0:
        raise ValueError(f'expected non-negative int for {key}, got {_value!r}')
    return _value


def _get_str(token_data: dict, key: str) -> str | None:
    _value = token_data.get(key)
    if _value is not None and not isinstance(_value, str):
        raise TypeError(f'expected str for {key}, got {_value!r}')
    return _value
