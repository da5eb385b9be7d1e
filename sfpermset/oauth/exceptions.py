from sfpermset.core.exceptions import SfPermsetException, SfPermsetUsageError


class OAuth2Error(SfPermsetException):
    def __init__(self, message, response=None):
        super(OAuth2Error, self).__init__(message)
        self.response = response


class OAuth2ConfigError(SfPermsetUsageError):
    pass
