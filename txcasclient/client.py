
# Application modules
from txcasclient.constants import (
    DEFAULT_SERVICE,
    PARAM_TICKET,
    STATE_AUTHENTICATED,
    STATE_NO_IDENTITY,
    STATE_REJECTED,
    STATE_TICKET_PENDING)
from txcasclient.exceptions import InvalidContinuation, TransportError
from txcasclient.http import RequestsTransport
from txcasclient.log import TwistedLogSink, log_cas_event
from txcasclient.settings import CASSettings
from txcasclient.signals import Proceed, Redirect, Unauthorized
from txcasclient.urls import CASURLBuilder, strip_ticket
from txcasclient.validator import TicketValidator, is_success_status


def redirect_to(url):
    """
    Make a continuation that redirects to `url` and stops.
    Usable as either the success or the failure continuation.
    """
    def redirect(*args):
        return Redirect(url)
    return redirect


class CASClient(object):
    """
    Binds a CAS identity to the caller's session.

    One instance serves one inbound request.  `authenticate()` walks the
    ticket lifecycle:

        - an identity already bound in the session is accepted as is;
        - otherwise a `casticket` on the request is validated;
        - otherwise the caller is sent to the login page.

    Continuations decide what happens at the end of each path and return
    a L{txcasclient.signals.Signal} for the web layer to act on.
    """

    def __init__(self, request, session, redirect_url=None,
                 service=DEFAULT_SERVICE, settings=None, transport=None,
                 validator=None, log_sink=None):
        """
        @param request: Provides L{IRequestContext}.
        @param session: Provides L{ISessionStore}.
        @param redirect_url: URL the provider sends the browser back to.
            Must be the same during authentication and validation.
            Defaults to the current request URL without its ticket.
        @param service: Service identifier registered with the provider.
        @param settings: A L{CASSettings}.
        @param transport: Provides L{IHTTPTransport}.  Used for the
            logout notification and by the default validator.
        @param validator: Provides L{ITicketValidator}.
        @param log_sink: Object with a `critical(message)` method.
        """
        if settings is None:
            settings = CASSettings()
        if transport is None:
            transport = RequestsTransport()
        if log_sink is None:
            log_sink = TwistedLogSink()
        self.request = request
        self.session = session
        self.service = service
        self.settings = settings
        self.transport = transport
        self.log_sink = log_sink
        if not redirect_url:
            redirect_url = strip_ticket(request.getCurrentURL())
        self.urls = CASURLBuilder(redirect_url, service, settings)
        if validator is None:
            validator = TicketValidator(self.urls, transport, log_sink)
        self.validator = validator
        self.state = STATE_NO_IDENTITY
        self._username = None

    def getService(self):
        return self.service

    def getRedirectURL(self):
        return self.urls.redirect_url

    def setRedirectURL(self, url):
        self.urls.redirect_url = url

    def getCurrentURL(self):
        return self.request.getCurrentURL()

    def getCasTicket(self):
        ticket = self.request.getQueryParam(PARAM_TICKET)
        if ticket is None:
            return ''
        return ticket

    def getLoginURL(self):
        return self.urls.loginURL()

    def getValidationURL(self):
        return self.urls.validationURL(self.getCasTicket())

    def getLogoutURL(self):
        return self.urls.logoutURL()

    def getSessionVar(self):
        return self.settings.sessionVar()

    def getUserName(self):
        """
        Return the identity of the current user, or None.
        Never triggers validation.
        """
        if self._username:
            return self._username
        return self.session.get(self.getSessionVar())

    def setUserName(self, name):
        """
        Set (or, with None, clear) the identity in this client and in the
        session.
        """
        var = self.getSessionVar()
        if name is None:
            self.session.delete(var)
        else:
            self.session.set(var, name)
        self._username = name

    #-------------------------------------------------------------------
    # Default continuations
    #-------------------------------------------------------------------

    def bindSession(self, username, url):
        """
        Default success continuation: store the identity in the session.
        """
        self.setUserName(username)
        return Proceed(username)

    def deny(self, url):
        """
        Default failure continuation: 401 Unauthorized, stop.
        """
        return Unauthorized()

    def redirectToLogin(self):
        """
        Default login continuation: redirect to the provider and stop.
        """
        return Redirect(self.getLoginURL())

    def _continuation(self, name, func, default):
        if func is None:
            return default
        if not callable(func):
            raise InvalidContinuation(
                "%s.authenticate() received a malformed %s parameter: %r" % (
                    self.__class__.__name__, name, func))
        return func

    def authenticate(self, onFailure=None, onSuccess=None, onLogin=None):
        """
        Authenticate the current request.

        @param onFailure: Called as `onFailure(current_url)` when a ticket
            does not validate.  Defaults to L{deny}.
        @param onSuccess: Called as `onSuccess(username, current_url)` when
            an identity is found.  Defaults to L{bindSession}.
        @param onLogin: Called as `onLogin()` when there is neither an
            identity nor a ticket.  Must stop request processing.  Defaults
            to L{redirectToLogin}.
        @raise InvalidContinuation: If a continuation is not callable.
        @return: Whatever the chosen continuation returns.
        """
        onFailure = self._continuation('onFailure', onFailure, self.deny)
        onSuccess = self._continuation('onSuccess', onSuccess, self.bindSession)
        onLogin = self._continuation('onLogin', onLogin, self.redirectToLogin)

        username = self.session.get(self.getSessionVar())
        if username:
            self.state = STATE_AUTHENTICATED
            log_cas_event("Authenticated via session", [
                ('service', self.service)])
            return onSuccess(username, self.getCurrentURL())

        ticket = self.getCasTicket()
        if ticket:
            self.state = STATE_TICKET_PENDING
            username = self.validator.validate(ticket, self.settings.timeout())
            if username is not None:
                self._username = username
                self.state = STATE_AUTHENTICATED
                log_cas_event("Validated service ticket", [
                    ('service', self.service)])
                return onSuccess(username, self.getCurrentURL())
            self.state = STATE_REJECTED
            log_cas_event("Service ticket rejected", [
                ('service', self.service)])
            return onFailure(self.getCurrentURL())

        self.state = STATE_NO_IDENTITY
        log_cas_event("Redirecting to login", [
            ('service', self.service)])
        return onLogin()

    def logout(self):
        """
        Clear the identity from the session, then notify the provider.

        The notification is best effort.  Returns True if it succeeded.
        """
        self.setUserName(None)
        self.state = STATE_NO_IDENTITY
        url = self.getLogoutURL()
        try:
            code, body = self.transport.get(url, timeout=self.settings.timeout())
        except TransportError as ex:
            self.log_sink.critical("%s: %s" % (self.__class__.__name__, ex))
            return False
        if not is_success_status(code):
            self.log_sink.critical(
                "%s: Logout request to %s returned status %d." % (
                    self.__class__.__name__, url, code))
            return False
        log_cas_event("Logged out", [('service', self.service)])
        return True
