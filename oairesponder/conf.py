from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from oairesponder.observers import LoggingObserver
from oairesponder.provider import OAIProvider


def get_provider() -> OAIProvider:
    '''build a provider from django settings

    OAIPMH_REPOSITORY (required): dotted path to a callable returning an OAIRepository
    OAIPMH_OBSERVER (optional): dotted path to a callable returning an observer
    '''
    _repository_factory = _load_setting('OAIPMH_REPOSITORY', required=True)
    _observer_factory = _load_setting('OAIPMH_OBSERVER', required=False)
    return OAIProvider(
        _repository_factory(),
        observer=(_observer_factory() if _observer_factory else LoggingObserver()),
    )


def _load_setting(setting_name, *, required):
    _dotted_path = getattr(settings, setting_name, None)
    if not _dotted_path:
        if required:
            raise ImproperlyConfigured(f'{setting_name} must be set to a dotted path')
        return None
    try:
        return import_string(_dotted_path)
    except ImportError as _error:
        raise ImproperlyConfigured(f'{setting_name}: could not import {_dotted_path} ({_error})')
