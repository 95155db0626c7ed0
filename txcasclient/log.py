
# Application modules
from txcasclient.interface import ILogSink

# External modules
from twisted.python import log
from zope.interface import implementer


def log_cas_event(label, attribs):
    """
    Log a CAS event.
    """
    parts = []
    for k,v in attribs:
        parts.append('''%s="%s"''' % (k, v))
    tail = ' '.join(parts)
    log.msg('''[INFO][CAS] label="%s" %s''' % (label, tail))


@implementer(ILogSink)
class TwistedLogSink(object):
    """
    Log sink that writes to the Twisted log.
    """

    def critical(self, message):
        log.msg('''[CRITICAL][CAS] %s''' % message)
