import os
import sys
from collections import OrderedDict
from importlib import import_module

from powerops.tools.logger import logger
from powerops.exceptions import PowerOpsException


# Object containing registered subcommands to be available to user. Dictionary is used in command line argument
# parsing of arguments defined with @args decorator as well as subcommand execution.
# Key will be used as a subcommand name, e.g.: ./vmwait.py stop ...
COMMANDS = OrderedDict()


def module_loader():
    """According to the listing output of the modules directory, method iterates over files located in the directory
    and loads appropiate subcommands, if name of the file being processed does not starts with underscore."""
    modules_dir = os.listdir(os.path.dirname(os.path.abspath(__file__)))
    # registered subcomands will be added into COMMANDS dictionary upon import
    for module in sorted(modules_dir):
        # do not process __init__.py file and everything else not ending with .py
        if not module.startswith('_') and module.endswith('.py'):
            import_module('powerops.modules.{}'.format(module[:-3]))

    return COMMANDS


class BaseCommands(object):
    """Introduces base class for other Commands classes with sharing of same connection content.
    Should be subclassed and its method execute() overriden. Docstring of the BaseCommands class
    should be overriden as well, beacause it will be used as a help for subcommand."""

    def __init__(self, connection=None):
        self.logger = logger
        self.connection = connection

    def execute(self, args):
        """Routes to a correct method based on arguments provided. This is also the perfect place
        to define generic arguments, which should be used for every method, via args decorator."""
        raise NotImplementedError("Cannot call super's execute() method! This method must be overidden.")

    @staticmethod
    def register(name, class_name):
        """Registers class itself as a subcommand with a provided name."""
        if COMMANDS.get(name, None):
            raise PowerOpsException('Subcommand with the name {} already registered!'.format(name))
        else:
            COMMANDS[name] = class_name

    def exit(self, msg, errno=1):
        """Provides way to fail during execution."""
        self.logger.error(msg)
        try:
            sys.exit(int(errno))
        except ValueError:
            sys.exit(1)
