import logging
import typing

from oairesponder.errors import OAIError
from oairesponder.models import RequestParameters


logger = logging.getLogger(__name__)


class OAIObserver(typing.Protocol):
    def error_reported(self, error: OAIError, request: RequestParameters) -> None:
        ...

    def request_handled(self, request: RequestParameters, status: int) -> None:
        ...


class NullObserver:
    def error_reported(self, error: OAIError, request: RequestParameters) -> None:
        pass

    def request_handled(self, request: RequestParameters, status: int) -> None:
        pass


class LoggingObserver:
    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger

    def error_reported(self, error: OAIError, request: RequestParameters) -> None:
        _verb = request.get('verb')
        self.logger.info(
            'OAI-PMH %s error for verb %s: %s',
            error.code,
            _verb,
            error.description,
            extra={'oai_verb': _verb, 'oai_error_code': error.code},
        )

    def request_handled(self, request: RequestParameters, status: int) -> None:
        _verb = request.get('verb')
        self.logger.debug('OAI-PMH %s handled (%s)', _verb, status, extra={'oai_verb': _verb})
