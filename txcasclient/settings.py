
# Standard library
import configparser
import io
import os
import os.path

# Application modules
from txcasclient.constants import (
    DEFAULT_LOGIN_URL,
    DEFAULT_LOGOUT_URL,
    DEFAULT_SESSION_VAR,
    DEFAULT_TIMEOUT,
    DEFAULT_VALIDATION_URL,
    ENV_LOGIN_URL,
    ENV_LOGOUT_URL,
    ENV_SESSION_VAR,
    ENV_TIMEOUT,
    ENV_VALIDATION_URL)
from txcasclient.interface import IConfigProvider

# External modules
from twisted.python import log
from zope.interface import implementer


def load_defaults(defaults):
    """
    Load default settings.
    """
    lines = []
    for section, opts in defaults.items():
        lines.append("[%s]" % section)
        for opt, value in opts.items():
            lines.append("%s = %s" % (opt, value))
    settings = '\n'.join(lines)
    del lines
    scp = configparser.ConfigParser(interpolation=None)
    buf = io.StringIO(settings)
    scp.read_file(buf)
    return scp

def load_settings(config_basename, defaults=None, syspath=None):
    """
    Load settings.
    """
    if defaults is None:
        defaults = {}
    scp = load_defaults(defaults)
    appdir = os.path.dirname(os.path.dirname(__file__))
    paths = []
    if syspath is not None:
        paths.append(os.path.join(syspath, "%s.cfg" % config_basename))
    paths.append(os.path.expanduser("~/.%src" % config_basename))
    paths.append(os.path.join(appdir, "%s.cfg" % config_basename))
    scp.read(paths)
    return scp

def option_name(name):
    """
    Map a setting name like `CAS_LOGIN_URL` to the option `login_url`.
    """
    name = name.lower()
    if name.startswith('cas_'):
        name = name[4:]
    return name


@implementer(IConfigProvider)
class EnvironmentConfig(object):
    """
    Settings from the process environment (or any mapping standing in for
    it).  Every lookup reads the mapping again.
    """

    def __init__(self, environ=None):
        self._environ = environ

    def get(self, name):
        environ = self._environ
        if environ is None:
            environ = os.environ
        return environ.get(name)


@implementer(IConfigProvider)
class ConfigParserConfig(object):
    """
    Settings from one section of a ConfigParser.
    """

    def __init__(self, scp, section='CAS'):
        self.scp = scp
        self.section = section

    def get(self, name):
        scp = self.scp
        opt = option_name(name)
        if not scp.has_option(self.section, opt):
            return None
        return scp.get(self.section, opt)


@implementer(IConfigProvider)
class ChainedConfig(object):
    """
    Consult several providers in order.  The first non-empty value wins.
    """

    def __init__(self, *providers):
        self.providers = list(providers)

    def get(self, name):
        for provider in self.providers:
            value = provider.get(name)
            if value:
                return value
        return None


def default_config(syspath='/etc/cas'):
    """
    Environment settings layered over the `cas.cfg` file settings.
    """
    scp = load_settings('cas', syspath=syspath)
    return ChainedConfig(EnvironmentConfig(), ConfigParserConfig(scp))


class CASSettings(object):
    """
    Live view of the client settings.

    Nothing is cached: each accessor consults the provider again so
    changes to the environment between calls are seen immediately.
    """

    def __init__(self, config=None):
        if config is None:
            config = EnvironmentConfig()
        self.config = config

    def _lookup(self, name, default):
        value = self.config.get(name)
        if not value:
            return default
        return value

    def loginURL(self):
        return self._lookup(ENV_LOGIN_URL, DEFAULT_LOGIN_URL)

    def validationURL(self):
        return self._lookup(ENV_VALIDATION_URL, DEFAULT_VALIDATION_URL)

    def logoutURL(self):
        return self._lookup(ENV_LOGOUT_URL, DEFAULT_LOGOUT_URL)

    def sessionVar(self):
        return self._lookup(ENV_SESSION_VAR, DEFAULT_SESSION_VAR)

    def timeout(self):
        """
        Connect timeout in seconds.  Zero disables the bound.
        """
        value = self.config.get(ENV_TIMEOUT)
        if value is None or value.strip() == "":
            return DEFAULT_TIMEOUT
        try:
            timeout = float(value)
        except ValueError:
            timeout = -1
        if timeout < 0:
            log.msg('''[WARN][CAS] label="Invalid timeout" value="%s"''' % value)
            return DEFAULT_TIMEOUT
        if timeout == int(timeout):
            timeout = int(timeout)
        return timeout
