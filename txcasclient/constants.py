
# Identity provider endpoints.
DEFAULT_LOGIN_URL = 'https://cas.iu.edu/cas/login'
DEFAULT_VALIDATION_URL = 'https://cas.iu.edu/cas/validate'
DEFAULT_LOGOUT_URL = 'https://cas.iu.edu/cas/logout'

DEFAULT_SERVICE = 'IU'
DEFAULT_SESSION_VAR = 'CAS_USER'
DEFAULT_TIMEOUT = 5

# Configuration names.
ENV_LOGIN_URL = 'CAS_LOGIN_URL'
ENV_VALIDATION_URL = 'CAS_VALIDATION_URL'
ENV_LOGOUT_URL = 'CAS_LOGOUT_URL'
ENV_SESSION_VAR = 'CAS_SESSION_VAR'
ENV_TIMEOUT = 'CAS_TIMEOUT'

# Wire parameters.
PARAM_SERVICE = 'cassvc'
PARAM_URL = 'casurl'
PARAM_TICKET = 'casticket'

# Authentication states.
STATE_NO_IDENTITY = 'NoIdentity'
STATE_TICKET_PENDING = 'TicketPending'
STATE_AUTHENTICATED = 'Authenticated'
STATE_REJECTED = 'Rejected'
