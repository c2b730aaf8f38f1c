"""
Django settings for Stockwatch tests.
"""

SECRET_KEY = 'stockwatch-tests'

DEBUG = False

USE_TZ = True
TIME_ZONE = 'America/Sao_Paulo'

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'stockwatch',
    'stockwatch.tests.testapp',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

STOCKWATCH = {
    'PRODUCT_MODEL': 'testapp.Product',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {'class': 'logging.StreamHandler'},
    },
    'loggers': {
        'stockwatch': {'handlers': ['console'], 'level': 'WARNING'},
    },
}
