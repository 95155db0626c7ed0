
# Application modules
from txcasclient.constants import DEFAULT_TIMEOUT
from txcasclient.exceptions import TransportError
from txcasclient.http import RequestsTransport
from txcasclient.interface import ITicketValidator
from txcasclient.log import TwistedLogSink

# External modules
from twisted.internet import reactor
from zope.interface import implementer


def parse_validation_response(body):
    """
    Parse the body of a `validate` response.

    The provider answers on 2 lines.  The first line is "yes" or "no".
    If "yes", the second line holds the username.  Both lines may carry
    extra whitespace.

    Returns the username or None.
    """
    if body is None:
        return None
    lines = body.split('\n', 2)
    if len(lines) < 2:
        return None
    if lines[0].strip() != 'yes':
        return None
    username = lines[1].strip()
    if username == "":
        return None
    return username

def is_success_status(code, allowed=((200, 299),)):
    for start_range, end_range in allowed:
        if code >= start_range and code <= end_range:
            return True
    return False


@implementer(ITicketValidator)
class TicketValidator(object):
    """
    Exchanges a service ticket for a username.

    A ticket may be used only once.  Each ticket submitted through this
    validator is remembered for `ticket_lifespan` seconds and is not sent
    to the provider again during that time.  Providers expire tickets
    within seconds, so older entries are dropped.
    Failures of any kind (a "no" answer, a malformed answer, a transport
    error or a timeout) result in None.  Only the log sink tells them
    apart.
    """

    ticket_lifespan = 300

    def __init__(self, urls, transport=None, log_sink=None, reactor=reactor):
        """
        @param urls: A L{txcasclient.urls.CASURLBuilder}.
        @param transport: Provides L{IHTTPTransport}.
        @param log_sink: Object with a `critical(message)` method.
        @param reactor: Provides `seconds()`; used to expire remembered
            tickets.
        """
        if transport is None:
            transport = RequestsTransport()
        if log_sink is None:
            log_sink = TwistedLogSink()
        self.urls = urls
        self.transport = transport
        self.log_sink = log_sink
        self.reactor = reactor
        self._submitted = {}

    def validate(self, ticket, timeout=DEFAULT_TIMEOUT):
        """
        Validate `ticket`.

        @param timeout: Seconds to wait for the connection.  Zero for no
            timeout.
        @return: The username, or None if validation failed.
        """
        self._expireSubmitted()
        if ticket in self._submitted:
            self.log_sink.critical(
                "%s: Ticket already submitted; refusing to validate it again." % (
                    self.__class__.__name__))
            return None
        self._submitted[ticket] = self.reactor.seconds()
        url = self.urls.validationURL(ticket)
        try:
            code, body = self.transport.get(url, timeout=timeout)
        except TransportError as ex:
            self.log_sink.critical("%s: %s" % (self.__class__.__name__, ex))
            self.log_sink.critical(
                "%s: Validation request to %s failed." % (
                    self.__class__.__name__, url))
            return None
        if not is_success_status(code):
            self.log_sink.critical(
                "%s: Validation request to %s returned status %d." % (
                    self.__class__.__name__, url, code))
            return None
        return parse_validation_response(body)

    def _expireSubmitted(self):
        cutoff = self.reactor.seconds() - self.ticket_lifespan
        expired = [t for t, when in self._submitted.items() if when <= cutoff]
        for ticket in expired:
            del self._submitted[ticket]

    def wasSubmitted(self, ticket):
        self._expireSubmitted()
        return ticket in self._submitted
