from collections.abc import Iterable


# http://www.openarchives.org/OAI/openarchivesprotocol.html#ErrorConditions
ERROR_CODES = {
    'badArgument': 'The request includes illegal arguments, is missing required arguments, includes a repeated argument, or values for arguments have an illegal syntax.',
    'badResumptionToken': 'The value of the resumptionToken argument is invalid or expired.',
    'badVerb': 'Value of the verb argument is not a legal OAI-PMH verb, the verb argument is missing, or the verb argument is repeated.',
    'cannotDisseminateFormat': 'The metadata format identified by the value given for the metadataPrefix argument is not supported by the item or by the repository.',
    'idDoesNotExist': 'The value of the identifier argument is unknown or illegal in this repository.',
    'noRecordsMatch': 'The combination of the values of the from, until, set and metadataPrefix arguments results in an empty list.',
    'noMetadataFormats': 'There are no metadata formats available for the specified item.',
    'noSetHierarchy': 'The repository does not support sets.',
}


class OAIError(Exception):
    def __init__(self, code, description=None):
        self.code = code
        self.description = description or ERROR_CODES[code]
        super().__init__(self.description)

    def __repr__(self):
        return f'{self.__class__.__name__}({self.code!r}, {self.description!r})'


class BadVerb(OAIError):
    def __init__(self, verbs=None):
        if not verbs:
            message = 'Missing OAI verb'
        elif len(verbs) > 1:
            message = 'Multiple OAI verbs: {}'.format(', '.join(verbs))
        else:
            message = 'Illegal OAI verb: {}'.format(verbs[0])
        super().__init__('badVerb', message)


class BadArgument(OAIError):
    def __init__(self, reason, name=None):
        if name is None:
            super().__init__('badArgument', reason)
        else:
            super().__init__('badArgument', '{} argument: {}'.format(reason, name))


class BadFormat(OAIError):
    def __init__(self, prefix=None):
        super().__init__(
            'cannotDisseminateFormat',
            'Invalid metadataPrefix: {}'.format(prefix) if prefix is not None else None,
        )


class BadRecordID(OAIError):
    def __init__(self, identifier=None):
        super().__init__(
            'idDoesNotExist',
            'Invalid record identifier: {}'.format(identifier) if identifier is not None else None,
        )


class BadResumptionToken(OAIError):
    def __init__(self, token=None, reason=None):
        if reason:
            message = '{}: {}'.format(reason, token)
        elif token is not None:
            message = 'Invalid or expired resumption token: {}'.format(token)
        else:
            message = None
        super().__init__('badResumptionToken', message)


class NoResults(OAIError):
    def __init__(self):
        super().__init__('noRecordsMatch')


class NoSetHierarchy(OAIError):
    def __init__(self):
        super().__init__('noSetHierarchy')


class NoMetadataFormats(OAIError):
    def __init__(self, identifier=None):
        super().__init__(
            'noMetadataFormats',
            'No metadata formats available for item: {}'.format(identifier) if identifier is not None else None,
        )


class OAIErrorList(Exception):
    '''several OAI errors, raised together and reported in order
    '''
    def __init__(self, errors: Iterable[OAIError]):
        self.errors = tuple(errors)
        if not self.errors:
            raise ValueError('OAIErrorList needs at least one error')
        super().__init__('; '.join(_error.description for _error in self.errors))

    def __iter__(self):
        return iter(self.errors)

    def __len__(self):
        return len(self.errors)


def as_oai_errors(error: BaseException) -> tuple[OAIError, ...]:
    '''flatten any exception into a sequence of OAI errors

    >>> as_oai_errors(NoResults())
    (NoResults('noRecordsMatch', 'The combination of ... results in an empty list.'),)
    >>> as_oai_errors(OAIErrorList([BadArgument('Illegal', 'foo'), BadArgument('Illegal', 'bar')]))
    (BadArgument('badArgument', 'Illegal argument: foo'), BadArgument('badArgument', 'Illegal argument: bar'))
    >>> as_oai_errors(KeyError('oops'))
    (OAIError('badArgument', "'oops'"),)
    '''
    if isinstance(error, OAIErrorList):
        return error.errors
    if isinstance(error, OAIError):
        return (error,)
    return (OAIError('badArgument', str(error) or error.__class__.__name__),)
