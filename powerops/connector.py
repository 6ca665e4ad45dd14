import ssl
import getpass
import requests
import atexit
import sys
from pyVmomi import vim
from pyVim.connect import SmartConnect, Disconnect

from powerops import config as conf
from powerops.tools.logger import logger
from powerops.exceptions import NotConnectedError


# Established sessions keyed by vCenter host name, the first one registered is the default one
CONNECTIONS = {}


def register(server, connection):
    """Makes already established session available for lookups by server name."""
    CONNECTIONS[server] = connection
    return connection


def get_connection(server=None):
    """Returns session registered for server. When server is not provided, session to the configured
    vCenter or the only registered session is used."""
    if not server:
        if len(CONNECTIONS) == 1:
            return list(CONNECTIONS.values())[0]
        elif not CONNECTIONS:
            raise NotConnectedError('Not connected to any vCenter!')
        server = conf.VCENTER
        if not server:
            raise NotConnectedError('Connected to more than one vCenter, server has to be specified!')

    try:
        return CONNECTIONS[server]
    except KeyError:
        raise NotConnectedError('Not connected to vCenter {}!'.format(server))


def connect(vcenter=None, username=None, password=None, insecure=None):
    """Creates connection object authenticated against provided vCenter. Created object can be than used
    up to user's permissions to interact with the vCenter via API."""
    # If arguments provided are None, load global directives
    vcenter = vcenter or conf.VCENTER
    username = username or conf.USERNAME
    password = password or conf.PASSWORD
    insecure = insecure or conf.INSECURE_CONNECTION
    # If only password is missing, prompt user interactively
    if (vcenter and username) and not password:
        password = getpass.getpass()
        conf.PASSWORD = password
    elif not (vcenter and username and password):
        logger.error('No authentication credentials provided!')
        sys.exit(1)

    ssl_context = None
    if insecure:
        requests.packages.urllib3.disable_warnings(requests.packages.urllib3.exceptions.InsecureRequestWarning)
        # Create SSL context for connection without certificate checks
        ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    try:
        logger.info('Trying to connect to {}...'.format(vcenter))
        connection = SmartConnect(host=vcenter, user=username, pwd=password, sslContext=ssl_context)
        # Register function to be executed at termination, eg. session cleanup
        atexit.register(Disconnect, connection)
        logger.info('Connection successful!')
        return register(vcenter, connection)
    except vim.fault.InvalidLogin:
        logger.error('Unable to connect. Check your credentials!')
        sys.exit(1)
    except (requests.exceptions.SSLError, requests.exceptions.ConnectionError, OSError) as e:
        logger.error(str(e))
        sys.exit(1)
