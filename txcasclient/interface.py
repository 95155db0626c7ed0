# External modules
from zope.interface import Interface, Attribute


class IHTTPTransport(Interface):

    def get(url, timeout=None):
        """
        Perform a GET request.

        @type url: C{str}
        @param url: The fully-qualified URL.
        @type timeout: C{int} or C{float}
        @param timeout: Connect timeout in seconds.  Zero or None disables it.

        @rtype: C{tuple}
        @return: (status_code, body_text)
        @raise txcasclient.exceptions.TransportError: If the request could
            not be completed.
        """

class ISessionStore(Interface):

    def get(key):
        """
        Return the value stored under `key` or None.
        """

    def set(key, value):
        """
        Store `value` under `key`.
        """

    def delete(key):
        """
        Remove `key`.  Removing an absent key does nothing.
        """

class ISessionValues(Interface):

    values = Attribute('Dictionary of values stored in a web session.')

class IRequestContext(Interface):

    def getQueryParam(name):
        """
        Return the first value of query parameter `name` or None.
        """

    def getCurrentURL():
        """
        Reconstruct the URL of the current request.
        """

class IConfigProvider(Interface):

    def get(name):
        """
        Look up setting `name`.  Returns a string or None.
        """

class ILogSink(Interface):

    def critical(message):
        """
        Report an error condition.
        """

class ITicketValidator(Interface):

    def validate(ticket, timeout=None):
        """
        Exchange `ticket` for an identity.
        Returns the username or None.
        """
