from powerops.constants import MIN_POLL_INTERVAL, MAX_POLL_INTERVAL
from powerops.exceptions import InvalidWaitSpec


def convert_to_int(value, unit='an integer'):
    """Converts value to integer without silently dropping fractions."""
    try:
        if isinstance(value, bool):
            raise ValueError
        if isinstance(value, float) and not value.is_integer():
            raise ValueError
        return int(value)
    except (TypeError, ValueError):
        raise InvalidWaitSpec('Unable to convert {} to {}. Aborting...'.format(value, unit))


def convert_to_seconds(value):
    """Converts duration to seconds. Accepts integers or strings with optional s/m/h suffix."""

    if isinstance(value, str):
        value = value.strip()
        if value.endswith('h'):
            return convert_to_int(value.rstrip('h'), 'seconds') * 3600
        elif value.endswith('m'):
            return convert_to_int(value.rstrip('m'), 'seconds') * 60
        elif value.endswith('s'):
            value = value.rstrip('s')

    return convert_to_int(value, 'seconds')


def normalize_interval(value):
    """Function converts passed value to integer, which will represent polling interval in seconds
    as well as performs control whether the value sits between global limits."""

    value = convert_to_seconds(value)
    if value < MIN_POLL_INTERVAL or value > MAX_POLL_INTERVAL:
        raise InvalidWaitSpec('Polling interval must be between {}-{} seconds'.format(
            MIN_POLL_INTERVAL, MAX_POLL_INTERVAL))
    else:
        return value


def normalize_limit(value, name, convert=convert_to_seconds):
    """Optional upper bound of a wait. None and 0 both mean no limit."""
    if value is None:
        return None

    value = convert(value)
    if value < 0:
        raise InvalidWaitSpec('{} must not be negative'.format(name))
    return value or None
