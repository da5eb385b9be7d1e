class SfPermsetException(Exception):
    """ Base class for all sfpermset Exceptions """

    pass


class SfPermsetUsageError(SfPermsetException):
    """ An exception thrown due to improper usage which should be resolvable by proper usage """

    pass


class SfPermsetFailure(SfPermsetException):
    """ An exception representing a failure reported by the remote system.  Hosts can handle these to determine fail vs error status """

    pass


class ActionOptionsError(SfPermsetUsageError):
    """ Raised when an action's params are invalid """

    pass


class AddressNotConfigured(SfPermsetUsageError):
    """ Raised when neither the address param nor the ADDRESS environment value is set """

    pass


class AuthenticationNotConfigured(SfPermsetUsageError):
    """ Raised when no supported combination of auth secrets is present """

    pass


class ContextError(SfPermsetUsageError):
    """ Raised when an execution context cannot be loaded """

    pass


class SalesforceApiError(SfPermsetFailure):
    """ Raised when a Salesforce REST call returns an unexpected response """

    def __init__(self, message, status_code=None, response=None):
        super(SalesforceApiError, self).__init__(message)
        self.status_code = status_code
        self.response = response


class UserNotFound(SfPermsetFailure):
    """ Raised when the username query returns no records """

    pass
