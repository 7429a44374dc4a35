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

remoteresources are real subclassable Python objects for the resources of a
RESTful JSON API, in the manner of ActiveRecord.

You define each kind of resource in the API as a `Resource` subclass. Its
instances then find, save and destroy themselves through plain HTTP verbs,
and the related resources embedded in the API's responses are hydrated into
instances of their own classes.

remoteresources have:

* per-property dirty tracking, so updates can send only what changed

* nested resource paths (``posts/1234/comments``) through `through()`

* pluggable middleware around every request, and an `httplib2` user agent
  underneath


Example
=======

For example, you can build a simplified blog API library in the shell::

    >>> from remoteresources import Connection, Resource, connections, fields
    >>> connections.add('default', Connection(base_uri='http://api.example.com/v1/'))
    >>> class Users(Resource):
    ...     pass
    ...
    >>> class Comments(Resource):
    ...     author = fields.Object(Users)
    ...
    >>> class Posts(Resource):
    ...     author   = fields.Object(Users)
    ...     comments = fields.List(fields.Object(Comments))
    ...
    >>> post = Posts.find(7)
    >>> post.author.get('name')
    'Brent'
    >>> post.set('title', 'A better title')
    >>> post.save()
    True
    >>> Comments.all_through(post).first().author.get('name')
    'Joe'


Failures
========

Connectivity failures always raise `TransportError`. By default unsuccessful
4xx responses do not raise: `save()` and `destroy()` return `False`,
`find()` and `all()` return `None`, and the instance's `error` (or the
connection's `last_response`) says why. 5xx responses raise a
`ResponseException`. Both are configurable per `Connection` with
``throw_on_4xx`` and ``throw_on_5xx``.

"""

__version__ = '1.0.0'
__date__ = '18 October 2026'

# Import resource before fields, which refers back to it.
from remoteresources.resource import Resource, includes_many, includes_one
from remoteresources import fields
from remoteresources.collection import Collection, build_collection
from remoteresources.connection import (Connection, ConnectionManager, LogEntry,
    Middleware, connections)
from remoteresources.errors import (ConnectionNotFound, InvalidPayloadFormat,
    RemoteResourceError, ResponseException, TransportError)
from remoteresources.http import Error, Request, Response

__all__ = ('Resource', 'fields', 'Collection', 'build_collection',
           'Connection', 'ConnectionManager', 'LogEntry', 'Middleware',
           'connections', 'Request', 'Response', 'Error', 'includes_one',
           'includes_many', 'RemoteResourceError', 'TransportError',
           'ResponseException', 'InvalidPayloadFormat', 'ConnectionNotFound')
