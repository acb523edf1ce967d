"""
Centralized logging configuration for the clinic flow service
"""

APP_LOGGERS = ['core', 'doctor', 'queue_management', 'appointments', 'analytics']


def get_logging_config(level='INFO', log_format='verbose'):
    """
    Get logging configuration for the deployment
    """
    formatter = 'json' if log_format == 'json' else 'verbose'

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'verbose': {
                'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
                'style': '{',
            },
            'simple': {
                'format': '{levelname} {message}',
                'style': '{',
            },
            'json': {
                '()': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
            },
        },
        'handlers': {
            'console': {
                'level': 'DEBUG',
                'class': 'logging.StreamHandler',
                'formatter': formatter,
            },
        },
        'loggers': {
            'django': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False,
            },
            'django.request': {
                'handlers': ['console'],
                'level': 'ERROR',
                'propagate': False,
            },
        },
    }

    for name in APP_LOGGERS:
        config['loggers'][name] = {
            'handlers': ['console'],
            'level': level,
            'propagate': False,
        }

    return config
