"""Process exit codes of the ``staffomatic`` CLI.

Every :class:`~staffomatic.exceptions.StaffomaticError` subclass carries one
of these, so scripts can tell a missing user from a bad password without
parsing stderr::

    $ staffomatic users get 42; echo $?
    4
"""

EXIT_SUCCESS = 0
EXIT_GENERIC_FAILURE = 1  # also config errors
EXIT_INVALID_USAGE = 2  # bad options, unknown fields in an update
EXIT_AUTH_FAILURE = 3  # HTTP 401/403, rejected credentials
EXIT_NOT_FOUND = 4  # HTTP 404
EXIT_SERVER_ERROR = 5  # HTTP 5xx
EXIT_CONNECTION_ERROR = 6  # DNS, refused, timeout
EXIT_CLIENT_ERROR = 7  # any other HTTP 4xx
