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

`Resource` is the class you subclass for each kind of resource in your
target API.

A `Resource` instance holds two sets of properties: the *stable* properties
hydrated from the API's responses, and the *modified* properties you have
set since. Reading a property returns its modified value if there is one,
or else its stable value. Saving sends the properties to the API and, if
that succeeds, makes them the new stable properties.

Related resources embedded in a payload are hydrated into instances of
their own `Resource` classes through the fields declared on your class (see
`remoteresources.fields`).

"""

from copy import deepcopy
import logging

import simplejson as json

import remoteresources.connection
import remoteresources.fields
from remoteresources.collection import Collection, build_collection, encode_value
from remoteresources.errors import InvalidPayloadFormat


log = logging.getLogger('remoteresources.resource')

classes_by_name = {}


def find_by_name(name):
    """Finds and returns the Resource subclass with the given name.

    Parameter `name` should be a bare class name with no module. If there is
    no class by that name, raises `KeyError`.

    """
    return classes_by_name[name]


def includes_one(cls, data):
    """Returns a new `cls` instance hydrated from `data`.

    Empty values and values that aren't dictionaries are returned unchanged,
    so an absent or ``null`` related resource stays as it is.

    """
    if not data or not isinstance(data, dict):
        return data
    return cls.from_dict(data)


def is_hydratable(data):
    """Returns whether `data` is a dictionary or a list of key-value pairs
    that `Resource.hydrate()` accepts."""
    if isinstance(data, dict):
        return True
    if isinstance(data, (list, tuple)):
        return all(isinstance(item, (list, tuple)) and len(item) == 2
                   for item in data)
    return False


def includes_many(cls, data, collection_class=Collection):
    """Returns a collection of `cls` instances, one hydrated from each
    dictionary in `data`. Empty or absent data yields an empty
    collection."""
    return build_collection(cls, data, collection_class=collection_class)


class ResourceMetaclass(type):
    """Metaclass for `Resource` classes.

    This metaclass installs all `remoteresources.fields.Property` instances
    declared as attributes of the new class, and builds the class's relation
    table, mapping API field names to the fields that decode them.

    This metaclass also makes the new class findable through the
    `resource.find_by_name()` function.

    """

    def __new__(cls, name, bases, attrs):
        fields = {}
        new_fields = {}

        # Inherit all the parent Resource classes' fields.
        for base in bases:
            if isinstance(base, ResourceMetaclass):
                fields.update(base.fields)

        for attrname, field in attrs.items():
            if isinstance(field, remoteresources.fields.Property):
                new_fields[attrname] = field
            elif attrname in fields:
                # Throw out any parent fields that the subclass defined as
                # something other than a Field.
                del fields[attrname]

        fields.update(new_fields)
        attrs['fields'] = fields
        obj_cls = super(ResourceMetaclass, cls).__new__(cls, name, bases, attrs)

        for attrname, field in new_fields.items():
            field.install(attrname, obj_cls)

        obj_cls.relations = dict((field.api_name, field)
            for field in fields.values()
            if isinstance(field, remoteresources.fields.Field))

        # Register the new class so Object fields can forward-reference it.
        classes_by_name[name] = obj_cls

        return obj_cls


class Resource(object, metaclass=ResourceMetaclass):

    """A resource of a RESTful API that can load, save and delete itself.

    Configure each subclass through its class attributes:

    `identifier`
       The name of the property holding the resource's ID. (Default: ``id``)

    `resource_name`
       The path segment of the resource's collection in the API. (Default:
       the lower-cased class name)

    `connection_name`
       The name of the `Connection` the resource is requested through.
       (Default: ``default``)

    `manager`
       The `ConnectionManager` in which that connection is registered.
       (Default: `remoteresources.connection.connections`)

    `read_only`
       Names of properties that only the API may set, such as server
       assigned timestamps. Setting them is silently ignored.

    `fillable`
       If not `None`, the only property names `fill()` will assign.

    `excluded`
       Names of properties never sent to the API when saving.

    Instances are not safe to modify from several threads at once.

    """

    identifier = 'id'
    resource_name = None
    connection_name = 'default'
    manager = None
    read_only = ()
    fillable = None
    excluded = ()

    def __init__(self, data=None, **kwargs):
        """Initializes a new `Resource`.

        Optional parameter `data` is a dictionary of API data to hydrate the
        instance with. Keyword arguments are set as modified properties, to
        be sent when the instance is saved.

        """
        self._stable = {}
        self._modified = {}
        self._dependencies = []
        self._response = None
        self._error = None

        if data:
            self.hydrate(data)
        for name, value in kwargs.items():
            if name in self.fields:
                setattr(self, name, value)
            else:
                self.set(name, value)

    @classmethod
    def connection(cls, name=None):
        """Returns the named `Connection`, by default the one named by the
        class's `connection_name`."""
        manager = cls.manager
        if manager is None:
            manager = remoteresources.connection.connections
        return manager.get(name or cls.connection_name)

    @classmethod
    def get_resource_name(cls):
        return cls.resource_name or cls.__name__.lower()

    @property
    def resource_id(self):
        return self.get(self.identifier)

    @property
    def response(self):
        """The `Response` to the instance's last request, if any."""
        return self._response

    @property
    def error(self):
        """The connection's `error_class` instance for the instance's last
        request, if it failed.

        A field declared as ``error`` or ``response`` hides these properties
        but never receives their values; read ``_error`` and ``_response``
        on such classes instead.

        """
        return self._error

    def has_identity(self):
        ident = self.resource_id
        return ident is not None and ident != ''

    def get_resource_uri(self):
        """Returns the path of this resource, relative to its connection's
        base URI.

        The path is any dependent resource paths added with `through()`,
        followed by the resource name and, if the instance has one, its ID.

        """
        parts = self._dependencies + [self.get_resource_name()]
        uri = '/'.join(part.strip('/') for part in parts)
        if self.has_identity():
            uri = '%s/%s' % (uri, self.resource_id)
        return uri

    def through(self, resource):
        """Adds a dependent resource path to prepend to this resource's path.

        For example, if the API only allows you to create a comment *through*
        its post's path (``POST /posts/1234/comments``):

        >>> comment = Comment(body='This is a comment')
        >>> comment.through('posts/1234')
        >>> comment.save()

        or, with a post you already have:

        >>> comment.through(Post.find(1234))

        Call `through()` more than once to add several levels of dependent
        resources. Adding a path that is already present does nothing.

        """
        if isinstance(resource, Resource):
            segment = resource.get_resource_uri()
        else:
            segment = str(resource).strip('/')
        if segment not in self._dependencies:
            self._dependencies.append(segment)
        return self

    def get(self, name, default=None):
        """Returns the value of the named property: its modified value if it
        has been set, else its hydrated value, else `default`."""
        if name in self._modified:
            return self._modified[name]
        return self._stable.get(name, default)

    def has(self, name):
        return name in self._modified or name in self._stable

    def set(self, name, value):
        """Sets the named property to `value`, to be sent when the instance
        is saved. Read-only properties are left unchanged."""
        if name in self.read_only:
            log.debug('Ignoring value for read-only property %r of %r',
                      name, self)
            return
        self._modified[name] = value

    def fill(self, data):
        """Sets the properties named by the keys of dictionary `data`.

        If the class has a `fillable` list, properties not in it are
        skipped.

        """
        for name, value in data.items():
            if self.fillable is not None and name not in self.fillable:
                continue
            self.set(name, value)

    def reset(self, *names):
        """Discards the modified values of the named properties, or of all
        properties if none are named."""
        if not names:
            self._modified = {}
            return
        for name in names:
            self._modified.pop(name, None)

    def original(self, name):
        """Returns the hydrated value of the named property, ignoring any
        modified value."""
        return self._stable.get(name)

    def is_dirty(self):
        return bool(self._modified)

    @property
    def modified(self):
        return dict(self._modified)

    def properties(self):
        """Returns a dictionary of all the instance's property values."""
        properties = dict(self._stable)
        properties.update(self._modified)
        return properties

    def hydrate(self, data):
        """Adds the content of a decoded API payload to the instance's stable
        properties.

        Parameter `data` is a dictionary, or a list of key-value pairs. Values
        with a field in the class's relation table are decoded through that
        field, so embedded related resources become instances of their own
        classes; other values are stored as they are. Empty data is ignored.

        """
        if not data:
            return
        if isinstance(data, (list, tuple)):
            if not all(isinstance(item, (list, tuple)) and len(item) == 2
                       for item in data):
                raise InvalidPayloadFormat('Cannot hydrate %r from list %r'
                    ' of non-pairs' % (self, data))
            data = dict(data)
        if not isinstance(data, dict):
            raise InvalidPayloadFormat('Cannot hydrate %r from non-dictionary'
                ' data source %r' % (self, data))

        for name, value in data.items():
            field = self.relations.get(name)
            if field is not None:
                value = field.decode(value)
            else:
                value = deepcopy(value)
            self._stable[name] = value

    @classmethod
    def from_dict(cls, data):
        """Decodes a dictionary into a new `Resource` instance."""
        self = cls()
        self.hydrate(data)
        return self

    def includes_one(self, cls, data):
        return includes_one(cls, data)

    def includes_many(self, cls, data, collection_class=Collection):
        return includes_many(cls, data, collection_class)

    def encode_properties(self, properties):
        data = {}
        for name, value in properties.items():
            field = self.relations.get(name)
            if field is not None and value is not None:
                data[name] = field.encode(value)
            else:
                data[name] = encode_value(value)
        return data

    def to_dict(self):
        """Encodes the instance's properties to a dictionary."""
        return self.encode_properties(self.properties())

    def to_json(self):
        return json.dumps(self.to_dict())

    def parse_find(self, payload):
        """Returns the data of a single resource from a response payload.

        This implementation returns the whole payload. Override this method
        if your target API wraps resources in an envelope.

        """
        return payload

    def parse_all(self, payload):
        """Returns the list of resource data from a response payload.

        This implementation returns the whole payload. Override this method
        if your target API wraps lists in an envelope.

        """
        return payload

    def encode_body(self, data):
        """Returns the request body to send for the given property
        dictionary when saving. Override to wrap it in an envelope."""
        return data

    def _hydrate_response(self, response):
        if response.payload is None:
            return
        data = self.parse_find(response.payload)
        if not is_hydratable(data):
            log.debug('Not hydrating %r from %d response payload %r',
                      self, response.status, data)
            return
        self.hydrate(data)

    def _fail(self, connection, response):
        self._error = connection.error_class(response)
        log.debug('Request for %r failed: %s', self, self._error)

    @classmethod
    def find(cls, id=None, query=None, headers=None):
        """Fetches the resource with the given ID.

        Returns the hydrated instance, or `None` if the response was not
        successful and the connection is not configured to throw for it (the
        response is then available as the connection's `last_response`).

        """
        return cls._find(None, id, query, headers)

    @classmethod
    def find_through(cls, resource, id, query=None, headers=None):
        """Fetches the resource with the given ID through a dependent
        resource, either a path or another `Resource` instance:

        >>> comment = Comment.find_through('posts/1234', 5678)
        >>> comment = Comment.find_through(post, 5678)

        both request ``posts/1234/comment/5678``.

        """
        return cls._find(resource, id, query, headers)

    @classmethod
    def _find(cls, through, id, query, headers):
        self = cls()
        if through is not None:
            self.through(through)
        uri = self.get_resource_uri()
        if id is not None and id != '':
            uri = '%s/%s' % (uri, id)

        connection = cls.connection()
        response = connection.get(uri, query, headers)
        self._response = response
        if not response.is_successful():
            self._fail(connection, response)
            return None

        self._hydrate_response(response)
        return self

    @classmethod
    def all(cls, query=None, headers=None):
        """Fetches every resource of this class as a collection.

        Returns `None` if the response was not successful and the connection
        is not configured to throw for it.

        """
        return cls._all(None, query, headers)

    @classmethod
    def all_through(cls, resource, query=None, headers=None):
        """Fetches every resource of this class through a dependent resource,
        either a path or another `Resource` instance."""
        return cls._all(resource, query, headers)

    @classmethod
    def _all(cls, through, query, headers):
        self = cls()
        if through is not None:
            self.through(through)

        connection = cls.connection()
        response = connection.get(self.get_resource_uri(), query, headers)
        self._response = response
        if not response.is_successful():
            self._fail(connection, response)
            return None

        def decode(item):
            # Members keep the dependent path they were found through.
            member = cls()
            member._dependencies = list(self._dependencies)
            member.hydrate(item)
            return member

        return build_collection(cls, self.parse_all(response.payload),
            collection_class=connection.collection_class, decode=decode)

    @classmethod
    def delete(cls, id, query=None, headers=None):
        """Deletes the resource with the given ID without fetching it first.

        Returns whether the API reported success.

        """
        self = cls()
        self._stable[cls.identifier] = id
        return self.destroy(query, headers)

    def save(self, query=None, headers=None):
        """Saves the instance to the API.

        An instance without an ID is created with a ``POST`` of all its
        properties. An instance with an ID is updated with the connection's
        `update_method`, sending all its properties, or only its modified
        ones if the connection's `update_diff` is set; if nothing was
        modified, no request is made. Properties named in `excluded` are never
        sent.

        Returns whether the save succeeded. On success the saved values and
        then the response's payload become the instance's stable properties;
        a payload that isn't a dictionary, such as a plain text body, is
        ignored. On failure the instance is left unchanged and `error` describes what
        went wrong.

        """
        connection = self.connection()

        if not self.has_identity():
            data = self.to_dict()
            method = 'POST'
        elif not self.is_dirty():
            log.debug('Not saving unmodified %r', self)
            return True
        else:
            if connection.update_diff:
                data = self.encode_properties(self._modified)
            else:
                data = self.to_dict()
            method = connection.update_method

        for name in self.excluded:
            data.pop(name, None)

        response = connection.request(method, self.get_resource_uri(), query,
                                      self.encode_body(data), headers)
        self._response = response
        if not response.is_successful():
            self._fail(connection, response)
            return False

        self._error = None
        stable, modified = self._stable, self._modified
        self._stable = dict(stable)
        self._stable.update(modified)
        self._modified = {}
        try:
            self._hydrate_response(response)
        except Exception:
            # Leave the instance dirty if the payload can't be hydrated.
            self._stable, self._modified = stable, modified
            raise
        return True

    def destroy(self, query=None, headers=None):
        """Deletes the instance's remote resource with a ``DELETE`` request.

        Returns whether the API reported success. The instance itself is not
        changed; discard it once it is destroyed.

        """
        if not self.has_identity():
            raise ValueError('Cannot destroy %r with no identifier' % (self,))

        connection = self.connection()
        response = connection.delete(self.get_resource_uri(), query, headers)
        self._response = response
        if not response.is_successful():
            self._fail(connection, response)
            return False

        self._error = None
        return True

    def __eq__(self, other):
        """Returns whether two `Resource` instances are of the same type and
        have the same properties."""
        if type(self) != type(other):
            return False
        return self.to_dict() == other.to_dict()

    def __ne__(self, other):
        return not self == other

    __hash__ = object.__hash__

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.get_resource_uri())
