
# Standard modules
from urllib.parse import parse_qs, urlsplit

# Application modules
from txcasclient.client import CASClient, redirect_to
from txcasclient.constants import (
    DEFAULT_LOGIN_URL,
    STATE_AUTHENTICATED,
    STATE_NO_IDENTITY,
    STATE_REJECTED)
from txcasclient.exceptions import InvalidContinuation, TransportError
from txcasclient.request import StaticRequestContext
from txcasclient.session import InMemorySessionStore
from txcasclient.settings import CASSettings, EnvironmentConfig
from txcasclient.signals import Proceed, Redirect, Unauthorized
from txcasclient.test.fakes import (
    FakeLogSink,
    FakeTransport,
    FakeValidator)

# External modules
import mock
from twisted.trial.unittest import TestCase


class CASClientTest(TestCase):

    current_url = 'http://localhost:8123/test'

    def setUp(self):
        self.environ = {}
        self.settings = CASSettings(EnvironmentConfig(self.environ))
        self.session = InMemorySessionStore()
        self.log_sink = FakeLogSink()
        self.transport = FakeTransport()

    def makeClient(self, url=None, validator=None, **kwds):
        if url is None:
            url = self.current_url
        return CASClient(
            StaticRequestContext(url),
            self.session,
            settings=self.settings,
            transport=self.transport,
            validator=validator,
            log_sink=self.log_sink,
            **kwds)

    def test_configuration(self):
        client = self.makeClient()
        self.assertEqual(client.getService(), 'IU')
        self.assertEqual(client.getRedirectURL(), self.current_url)
        self.assertEqual(client.getSessionVar(), 'CAS_USER')
        self.assertEqual(client.getCasTicket(), '')
        url = client.getLoginURL()
        self.assertEqual(url.split('?')[0], DEFAULT_LOGIN_URL)
        qs = parse_qs(urlsplit(url).query)
        self.assertEqual(qs['casurl'], [self.current_url])

    def test_redirect_url_drops_ticket(self):
        client = self.makeClient(self.current_url + '?casticket=ST-1')
        self.assertEqual(client.getRedirectURL(), self.current_url)
        self.assertEqual(client.getCasTicket(), 'ST-1')
        self.assertTrue(client.getValidationURL().endswith('&casticket=ST-1'))

    def test_callback_url_same_on_both_legs(self):
        for url in ['http://localhost:8123/search?q=a%20b',
                    'http://localhost:8123/search?flag']:
            login = self.makeClient(url)
            validation = self.makeClient(url + '&casticket=ST-1')
            self.assertEqual(login.getRedirectURL(), url)
            self.assertEqual(validation.getRedirectURL(), url)
            login_qs = urlsplit(login.getLoginURL()).query
            validation_qs = urlsplit(validation.getValidationURL()).query
            self.assertTrue(
                validation_qs.startswith(login_qs + '&casticket='), validation_qs)

    def test_explicit_redirect_url(self):
        client = self.makeClient(
            redirect_url='https://app.example.org/cas', service='APP')
        self.assertEqual(client.getRedirectURL(), 'https://app.example.org/cas')
        client.setRedirectURL('https://app.example.org/other')
        qs = parse_qs(urlsplit(client.getLoginURL()).query)
        self.assertEqual(qs['casurl'], ['https://app.example.org/other'])
        self.assertEqual(qs['cassvc'], ['APP'])

    def test_no_ticket_redirects_to_login(self):
        client = self.makeClient()
        signal = client.authenticate()
        self.assertIsInstance(signal, Redirect)
        self.assertTrue(signal.stop)
        self.assertEqual(signal.code, 303)
        self.assertEqual(signal.location, client.getLoginURL())
        self.assertEqual(client.state, STATE_NO_IDENTITY)

    def test_no_ticket_calls_only_login(self):
        onFailure = mock.Mock()
        onSuccess = mock.Mock()
        onLogin = mock.Mock(return_value='stop')
        validator = FakeValidator('alice')
        client = self.makeClient(validator=validator)
        result = client.authenticate(onFailure, onSuccess, onLogin)
        self.assertEqual(result, 'stop')
        onLogin.assert_called_once_with()
        self.assertFalse(onFailure.called)
        self.assertFalse(onSuccess.called)
        self.assertEqual(validator.tickets, [])

    def test_ticket_success(self):
        onFailure = mock.Mock()
        onSuccess = mock.Mock()
        onLogin = mock.Mock()
        url = self.current_url + '?casticket=ST-1'
        validator = FakeValidator('alice')
        client = self.makeClient(url, validator=validator)
        client.authenticate(onFailure, onSuccess, onLogin)
        onSuccess.assert_called_once_with('alice', url)
        self.assertFalse(onFailure.called)
        self.assertFalse(onLogin.called)
        self.assertEqual(validator.tickets, [('ST-1', 5)])
        self.assertEqual(client.state, STATE_AUTHENTICATED)
        # Custom continuations do not bind the session.
        self.assertEqual(client.getUserName(), 'alice')
        self.assertEqual(self.session.get('CAS_USER'), None)

    def test_ticket_success_binds_session(self):
        url = self.current_url + '?casticket=ST-1'
        client = self.makeClient(url, validator=FakeValidator('test_user'))
        signal = client.authenticate()
        self.assertIsInstance(signal, Proceed)
        self.assertFalse(signal.stop)
        self.assertEqual(signal.username, 'test_user')
        self.assertEqual(client.getUserName(), 'test_user')
        self.assertEqual(self.session.get('CAS_USER'), 'test_user')

    def test_ticket_failure(self):
        onFailure = mock.Mock()
        onSuccess = mock.Mock()
        onLogin = mock.Mock()
        url = self.current_url + '?casticket=badticket'
        client = self.makeClient(url, validator=FakeValidator(None))
        client.authenticate(onFailure, onSuccess, onLogin)
        onFailure.assert_called_once_with(url)
        self.assertFalse(onSuccess.called)
        self.assertFalse(onLogin.called)
        self.assertEqual(client.state, STATE_REJECTED)

    def test_ticket_failure_default(self):
        url = self.current_url + '?casticket=badticket'
        client = self.makeClient(url, validator=FakeValidator(None))
        signal = client.authenticate()
        self.assertIsInstance(signal, Unauthorized)
        self.assertTrue(signal.stop)
        self.assertEqual(signal.code, 401)
        self.assertEqual(client.getUserName(), None)

    def test_session_identity(self):
        """
        A bound identity is used without looking at the ticket.
        """
        self.session.set('CAS_USER', 'bob')
        onSuccess = mock.Mock()
        validator = FakeValidator('alice')
        client = self.makeClient(
            self.current_url + '?casticket=ST-1', validator=validator)
        client.authenticate(onSuccess=onSuccess)
        onSuccess.assert_called_once_with('bob', self.current_url + '?casticket=ST-1')
        self.assertEqual(validator.tickets, [])
        self.assertEqual(client.state, STATE_AUTHENTICATED)

    def test_authenticate_twice(self):
        """
        A second call starts over and finds the identity in the session.
        """
        url = self.current_url + '?casticket=ST-1'
        transport = FakeTransport((200, 'yes\ntest_user\n'))
        client = CASClient(
            StaticRequestContext(url), self.session, settings=self.settings,
            transport=transport, log_sink=self.log_sink)
        client.authenticate()
        self.assertEqual(client.getUserName(), 'test_user')
        onFailure = mock.Mock()
        onSuccess = mock.Mock()
        client.authenticate(onFailure, onSuccess)
        onSuccess.assert_called_once_with('test_user', url)
        self.assertFalse(onFailure.called)
        self.assertEqual(len(transport.requests), 1)

    def test_ticket_not_reused(self):
        """
        Without a bound session the same ticket is not validated twice.
        """
        url = self.current_url + '?casticket=ST-1'
        transport = FakeTransport((200, 'yes\ntest_user\n'))
        client = CASClient(
            StaticRequestContext(url), self.session, settings=self.settings,
            transport=transport, log_sink=self.log_sink)
        client.authenticate(onSuccess=lambda username, url: None)
        signal = client.authenticate()
        self.assertIsInstance(signal, Unauthorized)
        self.assertEqual(len(transport.requests), 1)

    def test_validator_timeout_setting(self):
        self.environ['CAS_TIMEOUT'] = '0'
        validator = FakeValidator('alice')
        client = self.makeClient(
            self.current_url + '?casticket=ST-1', validator=validator)
        client.authenticate()
        self.assertEqual(validator.tickets, [('ST-1', 0)])

    def test_redirect_to(self):
        client = self.makeClient(
            self.current_url + '?casticket=ST-1', validator=FakeValidator('alice'))
        signal = client.authenticate(
            onSuccess=redirect_to('http://localhost:8123/home'))
        self.assertIsInstance(signal, Redirect)
        self.assertEqual(signal.location, 'http://localhost:8123/home')
        client = self.makeClient(
            self.current_url + '?casticket=ST-2', validator=FakeValidator(None))
        signal = client.authenticate(
            onFailure=redirect_to('http://localhost:8123/denied'))
        self.assertEqual(signal.location, 'http://localhost:8123/denied')

    def test_invalid_continuation(self):
        client = self.makeClient(validator=FakeValidator('alice'))
        self.assertRaises(InvalidContinuation, client.authenticate, True)
        self.assertRaises(InvalidContinuation, client.authenticate, None, 'http://x')
        self.assertRaises(TypeError, client.authenticate, None, None, 42)

    def test_setUserName_none(self):
        client = self.makeClient()
        client.setUserName('alice')
        self.assertEqual(self.session.get('CAS_USER'), 'alice')
        self.assertEqual(client.getUserName(), 'alice')
        client.setUserName(None)
        self.assertEqual(client.getUserName(), None)
        self.assertNotIn('CAS_USER', self.session.values)

    def test_getUserName_never_validates(self):
        validator = FakeValidator('alice')
        client = self.makeClient(
            self.current_url + '?casticket=ST-1', validator=validator)
        self.assertEqual(client.getUserName(), None)
        self.assertEqual(validator.tickets, [])

    def test_session_var_override(self):
        client = self.makeClient()
        self.environ['CAS_SESSION_VAR'] = 'TEST_CAS_USER'
        client.setUserName('alice')
        self.assertEqual(self.session.get('TEST_CAS_USER'), 'alice')
        self.assertEqual(self.session.get('CAS_USER'), None)
        other = self.makeClient()
        self.assertEqual(other.getUserName(), 'alice')
        self.environ['CAS_SESSION_VAR'] = 'OTHER_USER'
        self.assertEqual(other.getUserName(), None)

    def test_logout(self):
        self.transport.responses.append((200, ''))
        client = self.makeClient()
        client.setUserName('alice')
        self.assertTrue(client.logout())
        self.assertEqual(client.getUserName(), None)
        self.assertNotIn('CAS_USER', self.session.values)
        self.assertEqual(
            self.transport.requests, [('https://cas.iu.edu/cas/logout', 5)])
        self.assertEqual(self.log_sink.messages, [])

    def test_logout_transport_error(self):
        self.transport.responses.append(TransportError("unreachable"))
        client = self.makeClient()
        client.setUserName('alice')
        self.assertFalse(client.logout())
        self.assertEqual(client.getUserName(), None)
        self.assertNotIn('CAS_USER', self.session.values)
        self.assertEqual(len(self.log_sink.messages), 1)
        self.assertIn('unreachable', self.log_sink.messages[0])

    def test_logout_error_status(self):
        self.transport.responses.append((500, 'Internal Server Error'))
        client = self.makeClient()
        client.setUserName('alice')
        self.assertFalse(client.logout())
        self.assertEqual(client.getUserName(), None)
        self.assertNotIn('CAS_USER', self.session.values)
        self.assertEqual(len(self.log_sink.messages), 1)
        self.assertIn('500', self.log_sink.messages[0])

    def test_logout_idempotent(self):
        self.transport.responses.extend([(200, ''), (200, '')])
        client = self.makeClient()
        client.logout()
        client.logout()
        self.assertEqual(client.getUserName(), None)
