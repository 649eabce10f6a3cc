from collections.abc import Callable, Iterable

from oairesponder import errors as oai_errors
from oairesponder.dates import Granularity, RequestDate, parse_request_date
from oairesponder.models import ListQuery, RequestParameters
from oairesponder.repository import OAIRepository


# a check returns an error (or raises one, e.g. from the repository) or returns None
Check = Callable[[], oai_errors.OAIError | None]


def run_checks(checks: Iterable[Check]) -> None:
    '''run every check (no short-circuit), then raise all errors together, in order
    '''
    _errors = []
    for _check in checks:
        try:
            _error = _check()
        except oai_errors.OAIError as _raised:
            _error = _raised
        if _error is not None:
            _errors.append(_error)
    if _errors:
        raise oai_errors.OAIErrorList(_errors)


def check_required(request: RequestParameters, argument_name: str) -> Check:
    def _check():
        if argument_name not in request:
            return oai_errors.BadArgument('Required', argument_name)
    return _check


def check_metadata_prefix(
    request: RequestParameters,
    repository: OAIRepository,
    identifier: str | None = None,
) -> Check:
    def _check():
        _prefix = request.get('metadataPrefix')
        if _prefix is None:
            return oai_errors.BadArgument('Required', 'metadataPrefix')
        _available = repository.list_metadata_formats(identifier)
        if not any(_format.prefix == _prefix for _format in _available):
            return oai_errors.BadFormat(_prefix)
    return _check


def validate_get_record(request: RequestParameters, repository: OAIRepository) -> tuple[str, str]:
    run_checks([
        check_required(request, 'identifier'),
        check_metadata_prefix(request, repository, identifier=request.get('identifier')),
    ])
    return request.get('metadataPrefix'), request.get('identifier')


def validate_list_query(request: RequestParameters, repository: OAIRepository) -> ListQuery:
    '''check the arguments shared by ListRecords and ListIdentifiers (when not resuming)
    '''
    _from: RequestDate | None = None
    _until: RequestDate | None = None

    def _check_from():
        nonlocal _from
        if 'from' in request:
            _from = parse_request_date('from', request.get('from'))

    def _check_until():
        nonlocal _until
        if 'until' in request:
            _until = parse_request_date('until', request.get('until'))

    def _check_order():
        if _from is not None and _until is not None and _from.value > _until.value:
            return oai_errors.BadArgument('The `from` argument must be less than or equal to the `until` argument')

    def _check_same_granularity():
        if _from is not None and _until is not None and _from.granularity is not _until.granularity:
            return oai_errors.BadArgument('The `from` and `until` arguments have different granularity')

    def _check_supported_granularity(argument_name):
        def _check():
            _date = _from if argument_name == 'from' else _until
            # only second-granularity dates can be too fine
            if (
                _date is not None
                and _date.granularity is Granularity.SECOND
                and _date.granularity.is_finer_than(repository.get_granularity())
            ):
                return oai_errors.BadArgument(
                    f'The granularity of the `{argument_name}` argument is not supported by this repository'
                )
        return _check

    run_checks([
        _check_from,
        _check_until,
        _check_order,
        _check_same_granularity,
        _check_supported_granularity('from'),
        _check_supported_granularity('until'),
        check_metadata_prefix(request, repository),
    ])
    return ListQuery(
        metadata_prefix=request.get('metadataPrefix'),
        from_=_from.value if _from else None,
        until=_until.value if _until else None,
        set_spec=request.get('set'),
    )
