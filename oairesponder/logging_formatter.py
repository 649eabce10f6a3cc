import json
import logging


class JsonLogFormatter(logging.Formatter):
    EXTRA_FIELDS = ('oai_verb', 'oai_error_code')

    def format(self, record):
        _log = {
            'severity': record.levelname,
            'logger': record.name,
            'message': super().format(record),
        }
        for _field in self.EXTRA_FIELDS:
            if hasattr(record, _field):
                _log[_field] = getattr(record, _field)
        return json.dumps(_log)
