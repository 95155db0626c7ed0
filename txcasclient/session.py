
# Application modules
from txcasclient.interface import ISessionStore, ISessionValues

# External modules
from twisted.python.components import registerAdapter
from twisted.web.server import Session
from zope.interface import implementer


@implementer(ISessionStore)
class InMemorySessionStore(object):
    """
    A session store that exists entirely in system memory.
    """

    def __init__(self, values=None):
        if values is None:
            values = {}
        self.values = values

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value

    def delete(self, key):
        self.values.pop(key, None)


@implementer(ISessionValues)
class SessionValues(object):
    """
    Values kept for the lifetime of a `twisted.web.server.Session`.
    """

    def __init__(self, session):
        self.values = {}

registerAdapter(SessionValues, Session, ISessionValues)


class TwistedSessionStore(InMemorySessionStore):
    """
    Session store backed by the web session of a Twisted request.
    """

    def __init__(self, request):
        session = request.getSession()
        InMemorySessionStore.__init__(self, ISessionValues(session).values)
