import os
import yaml


def get_config(section, key, env_var, var_type, default=None):
    """Tries to load configuration directive from environment variable or configuration file in
    the exact order. This directives could be overriden via command line arguments."""
    try:
        value = os.getenv(env_var, None) if env_var else None
        if not value:
            section = CONFIG_FILE.get(section, None)
            if section[key] is None:
                return default
            return var_type(section[key])
        else:
            return var_type(value)
    except (AttributeError, KeyError, TypeError, ValueError):
        return default


def to_bool(value):
    """Environment variables are strings, 'false' must not evaluate to True."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def load_config_file(path=None):
    """Reads YAML configuration file. If path to the file is not provided via environment variable
    VMWAIT_CONFIG_FILE, an attempt is made to load locally present file named 'vmwait.yml'."""
    path = path or os.getenv('VMWAIT_CONFIG_FILE', None) or 'vmwait.yml'
    try:
        with open(path) as stream:
            return yaml.safe_load(stream)
    except IOError:
        return None


CONFIG_FILE = load_config_file()

# Loading of configuration directives is handled by get_config function
# These directives are default settings used within program when used directive is not provided via command line
# Logging configuration directives
LOG_FORMAT          = get_config('logging', 'log_format', 'VMWAIT_LOG_FORMAT', str, '%(asctime)s %(levelname)s %(message)s')
LOG_PATH            = get_config('logging', 'log_path', 'VMWAIT_LOG_PATH', str, None)
LOG_LEVEL           = get_config('logging', 'log_level', 'VMWAIT_LOG_LEVEL', str, 'WARNING')

# Authentication directives
# If password is neither provided via command line or present in ENV variable or configuration file,
# user will be prompted to enter his password after program starts
USERNAME            = get_config('authentication', 'username', 'VMWAIT_USERNAME', str, None)
PASSWORD            = get_config('authentication', 'password', 'VMWAIT_PASSWORD', str, None)
VCENTER             = get_config('authentication', 'vcenter', 'VMWAIT_VCENTER', str, None)
INSECURE_CONNECTION = get_config('authentication', 'insecure_connection', 'VMWAIT_INSECURE_CONNECTION', to_bool, False)

# Wait directives
# Leaving max_wait and max_polls unset keeps waiting until the remote state is reached
POLL_INTERVAL       = get_config('wait', 'poll_interval', 'VMWAIT_POLL_INTERVAL', int, 5)
MAX_WAIT            = get_config('wait', 'max_wait', 'VMWAIT_MAX_WAIT', int, None)
MAX_POLLS           = get_config('wait', 'max_polls', 'VMWAIT_MAX_POLLS', int, None)

# Timeouts
GUEST_CMD_TIMEOUT   = get_config('timeouts', 'guest_command', 'VMWAIT_GUEST_CMD_TIMEOUT', int, 60)

# Guest information
# Login information used to access guests operating system
VM_GUEST_USER       = get_config('guest', 'guest_user', 'VMWAIT_GUEST_USER', str, None)
VM_GUEST_PASS       = get_config('guest', 'guest_pass', 'VMWAIT_GUEST_PASS', str, None)
# Program run inside the guest to detect finished first-boot customization, exit code 0 means done
CUSTOMIZATION_PROGRAM = get_config('guest', 'customization_program', 'VMWAIT_CUSTOMIZATION_PROGRAM', str,
                                   '/usr/bin/test')
CUSTOMIZATION_ARGS  = get_config('guest', 'customization_args', 'VMWAIT_CUSTOMIZATION_ARGS', str,
                                 '-f /var/lib/cloud/instance/boot-finished')
