import doctest

import oairesponder.dates
import oairesponder.errors
import oairesponder.memory_repository
import oairesponder.models
import oairesponder.tokens
import oairesponder.util

_DOCTEST_OPTIONFLAGS = (
    doctest.ELLIPSIS
    | doctest.NORMALIZE_WHITESPACE
)

_MODULES_WITH_DOCTESTS = (
    oairesponder.dates,
    oairesponder.errors,
    oairesponder.memory_repository,
    oairesponder.models,
    oairesponder.tokens,
    oairesponder.util,
)


def _make_test_fn(testcase):
    def _test():
        _result = testcase.run()
        for _error_testcase, _traceback in _result.errors:
            print(f'ERROR({_error_testcase}):\n{_traceback}')
        for _error_testcase, _traceback in _result.failures:
            print(f'FAILURE({_error_testcase}):\n{_traceback}')
        assert not _result.failures and not _result.errors
    return _test


for _module in _MODULES_WITH_DOCTESTS:
    # HACK: allow running with pytest
    globals().update({
        f'test_doctest_{_module.__name__}_{_i}': _make_test_fn(_test_case)
        for _i, _test_case in enumerate(doctest.DocTestSuite(_module, optionflags=_DOCTEST_OPTIONFLAGS))
    })
