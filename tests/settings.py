SECRET_KEY = 'not-a-secret-oairesponder-tests'

DEBUG = False

ALLOWED_HOSTS = ['testserver']

ROOT_URLCONF = 'oairesponder.urls'

INSTALLED_APPS = []

MIDDLEWARE = []

DATABASES = {}

USE_TZ = True

OAIPMH_REPOSITORY = 'tests.oai_fixtures.FakeRepository'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'json': {
            '()': 'oairesponder.logging_formatter.JsonLogFormatter',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'json',
        },
    },
    'loggers': {
        'oairesponder': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': True,
        },
    },
}
