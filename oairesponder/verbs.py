import dataclasses
import types

from oairesponder import errors as oai_errors
from oairesponder.models import RequestParameters


@dataclasses.dataclass(frozen=True)
class OAIVerb:
    name: str
    required: frozenset[str] = frozenset()
    optional: frozenset[str] = frozenset()
    exclusive: str | None = None

    @property
    def allowed(self) -> frozenset[str]:
        return self.required | self.optional | ({self.exclusive} if self.exclusive else set())

    @classmethod
    def from_request(cls, request: RequestParameters) -> 'OAIVerb':
        _verbs = request.verbs
        if len(_verbs) != 1:
            raise oai_errors.BadVerb(_verbs)
        try:
            return VERBS[_verbs[0]]
        except KeyError:
            raise oai_errors.BadVerb(_verbs)

    def validate_argument_names(self, request: RequestParameters) -> None:
        errors = []
        keys = request.argument_names

        for arg in keys:
            if arg not in self.allowed:
                errors.append(oai_errors.BadArgument('Illegal', arg))

        for arg in request.repeated_names:
            errors.append(oai_errors.BadArgument('Repeated', arg))

        if self.exclusive and self.exclusive in request and len(keys) > 1:
            errors.append(oai_errors.BadArgument('Exclusive', self.exclusive))

        if errors:
            raise oai_errors.OAIErrorList(errors)

    def is_resuming(self, request: RequestParameters) -> bool:
        return bool(self.exclusive) and self.exclusive in request


_LIST_ARGUMENTS = {
    'required': frozenset({'metadataPrefix'}),
    'optional': frozenset({'from', 'until', 'set'}),
    'exclusive': 'resumptionToken',
}

# closed: no verbs or arguments are added at runtime
VERBS = types.MappingProxyType({
    _verb.name: _verb
    for _verb in (
        OAIVerb('Identify'),
        OAIVerb('ListMetadataFormats', optional=frozenset({'identifier'})),
        OAIVerb('ListSets', exclusive='resumptionToken'),
        OAIVerb('GetRecord', required=frozenset({'identifier', 'metadataPrefix'})),
        OAIVerb('ListIdentifiers', **_LIST_ARGUMENTS),
        OAIVerb('ListRecords', **_LIST_ARGUMENTS),
    )
})
