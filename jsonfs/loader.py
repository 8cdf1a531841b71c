import json
import logging
import math
from decimal import Decimal

from .errors import ParseError

log = logging.getLogger(__name__)


def _reject_constant(name):
    raise ValueError('non-finite number %s is not valid JSON' % name)


def _parse_float(text):
    value = float(text)
    if not math.isfinite(value):
        raise ValueError('number %s is out of range' % text)
    return value


def _parse_int(text):
    try:
        return int(text)
    except ValueError:
        # past the interpreter's int/str digit limit; Decimal keeps every digit
        return Decimal(text)


def parse_document(text):
    """Parse a JSON document held in memory into plain Python values."""
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError('descriptor is not valid UTF-8: %s' % e) from e
    try:
        return json.loads(text, parse_constant=_reject_constant,
                          parse_float=_parse_float, parse_int=_parse_int)
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, e.lineno, e.colno) from e
    except RecursionError as e:
        raise ParseError('document is nested too deeply') from e
    except ValueError as e:
        raise ParseError(str(e)) from e


def load_document(path):
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise ParseError('cannot read %s: %s' % (path, e.strerror or e)) from e
    log.debug('Read %d bytes from %s', len(raw), path)
    return parse_document(raw)
