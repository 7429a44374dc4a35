# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

Exceptions raised by `remoteresources`.

Connectivity failures always surface as `TransportError`. Unsuccessful HTTP
responses surface as `ResponseException` (or one of its status-specific
subclasses) only when the `Connection` is configured to throw for that
status range; otherwise the response is returned for the caller to inspect.

"""


class RemoteResourceError(Exception):
    """Base class for all `remoteresources` exceptions."""
    pass


class TransportError(RemoteResourceError):
    """An exception raised when the user agent could not complete an HTTP
    exchange at all.

    This covers DNS failures, refused connections, timeouts and TLS errors.
    The original user agent exception is available as `__cause__`.

    """
    pass


class InvalidPayloadFormat(RemoteResourceError, TypeError):
    """An exception raised when decoded data is structurally unusable for
    hydrating a `Resource` or building a collection."""
    pass


class ConnectionNotFound(RemoteResourceError, KeyError):
    """An exception raised when a connection name was never registered."""

    def __str__(self):
        # KeyError would repr() the message otherwise.
        return str(self.args[0]) if self.args else ''


class ResponseException(RemoteResourceError):
    """An exception thrown when the server's response matched a status the
    `Connection` is configured to throw for.

    The triggering `Request` and the full `Response` are available as the
    `request` and `response` attributes, so callers can pull an API specific
    error payload out of ``exc.response.payload``.

    """

    def __init__(self, request, response, message=None):
        if message is None:
            message = '%d %s requesting %s %s' % (response.status,
                response.reason or '', request.method, request.uri)
        super(ResponseException, self).__init__(message)
        self.request = request
        self.response = response

    @property
    def status(self):
        return self.response.status

    @classmethod
    def for_response(cls, request, response):
        """Returns an instance of the most specific `ResponseException`
        subclass for the response's status code."""
        status = response.status
        if status in status_exceptions:
            exc_cls = status_exceptions[status]
        elif status >= 500:
            exc_cls = ServerError
        else:
            exc_cls = cls
        return exc_cls(request, response)


class RequestError(ResponseException):
    """A `ResponseException` thrown when the server reports an error in the
    client's request.

    This exception corresponds to the HTTP status code 400.

    """
    pass


class Unauthorized(ResponseException):
    """A `ResponseException` thrown when the server reports that the
    requested resource is not available through an unauthenticated request.

    This exception corresponds to the HTTP status code 401. Thus when this
    exception is received, the caller may need to try again using the
    available authentication credentials.

    """
    pass


class Forbidden(ResponseException):
    """A `ResponseException` thrown when the server reports that the client,
    as authenticated, is not authorized to request the requested resource.

    This exception corresponds to the HTTP status code 403.

    """
    pass


class NotFound(ResponseException):
    """A `ResponseException` thrown when the server reports that the
    requested resource was not found."""
    pass


class PreconditionFailed(ResponseException):
    """A `ResponseException` thrown when the server reports that some of the
    conditions in a conditional request were not true.

    This exception corresponds to the HTTP status code 412. The most common
    cause of this status is an attempt to ``PUT`` a resource that has already
    changed on the server.

    """
    pass


class ServerError(ResponseException):
    """A `ResponseException` thrown when the server reports an unexpected
    error (any 5xx status)."""
    pass


status_exceptions = {
    400: RequestError,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    412: PreconditionFailed,
}
