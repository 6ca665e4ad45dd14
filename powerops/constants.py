LOG_LEVEL_CHOICES = [
    'NOTSET',
    'DEBUG',
    'INFO',
    'WARNING',
    'ERROR',
    'CRITICAL'
]

# Polling interval limits in seconds
MIN_POLL_INTERVAL = 1
MAX_POLL_INTERVAL = 3600

PROBE_FAILURE_POLICIES = ['retry', 'escalate']

# vSphere runtime.powerState values
VM_POWERED_ON = 'poweredOn'
VM_POWERED_OFF = 'poweredOff'
VM_SUSPENDED = 'suspended'

# guest.toolsRunningStatus value required for guest operations
VM_TOOLS_RUNNING = 'guestToolsRunning'

# Delay between checks of a program started inside the guest
GUEST_CMD_POLL_DELAY = 1

# Managed object id of a virtual machine, anything else read from input is a name
VM_MOID_PATTERN = r'^vm-\d+$'
