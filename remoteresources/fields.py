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

Fields are class attributes for `Resource` subclasses that declare how API
data is hydrated into your properties.

Each `Resource` class collects its fields into a relation table keyed by
API field name. When a payload is hydrated, a value whose key has a field in
the table is decoded through that field; any other value is kept verbatim.
Use `Object` for an embedded related resource and `List` for an embedded
collection of them:

>>> class Post(Resource):
...     author   = fields.Object('User')
...     comments = fields.List(fields.Object('Comment'))
...

"""

from datetime import datetime, timezone

import remoteresources.collection
import remoteresources.resource


class Property(object):

    """An attribute that can be installed declaratively on a `Resource`
    class."""

    def install(self, attrname, cls):
        """Signals to the `Property` that it has been installed on the given
        class as an attribute with the given name.

        This implementation does nothing. Override this method to customize
        the behavior to install an attribute on `Resource` classes where your
        field is declared.

        """
        pass


class Field(Property):

    """A property for decoding API values into resource properties and
    encoding them back.

    Declaring a `Field` also provides attribute access to the property, so
    ``post.title`` reads ``post.get('title')`` and ``post.title = 'x'`` calls
    ``post.set('title', 'x')``: pending values shadow hydrated ones and
    read-only properties stay unchanged. Deleting the attribute discards any
    pending value.

    """

    def __init__(self, api_name=None, default=None):
        """Sets the field's matching API field name and default value.

        Optional parameter `api_name` is the key of this field's value in the
        API data. If not given, the attribute name of the field when its class
        was defined is used.

        Optional parameter `default` is the value to use when the resource
        has no value for the field. `default` can be a value or callable
        function; a callable is passed the resource instance.

        """
        self.api_name = api_name
        self.default  = default

    def install(self, attrname, cls):
        self.attrname = attrname
        if self.api_name is None:
            self.api_name = attrname
        self.of_cls = cls

    def __get__(self, obj, cls):
        if obj is None:
            # Yield the real field instance when gotten through the class.
            return self

        if obj.has(self.api_name):
            return obj.get(self.api_name)
        if callable(self.default):
            return self.default(obj)
        return self.default

    def __set__(self, obj, value):
        obj.set(self.api_name, value)

    def __delete__(self, obj):
        obj.reset(self.api_name)

    def decode(self, value):
        """Decodes an API value into a resource property value.

        This implementation returns the `value` parameter unchanged.

        """
        return value

    def encode(self, value):
        """Encodes a resource property value into an API value.

        This implementation returns the `value` parameter unchanged.

        """
        return value


class AcceptsStringCls(object):
    """Mixin for fields with a ``cls`` attribute that can either be a
    ``Resource`` subclass or a string name of a ``Resource`` subclass (to
    allow forward references)."""

    def get_cls(self):
        cls = self.__dict__['cls']
        if not callable(cls):
            cls = remoteresources.resource.find_by_name(cls)
        return cls

    def set_cls(self, cls):
        self.__dict__['cls'] = cls

    cls = property(get_cls, set_cls)


class Object(AcceptsStringCls, Field):

    """A field representing a single embedded related resource."""

    def __init__(self, cls, **kwargs):
        """Sets the `Resource` class the field represents.

        `cls` may also be the name of a class, in which case the most
        recently declared `Resource` subclass with that name is used.

        """
        super(Object, self).__init__(**kwargs)
        self.cls = cls

    def decode(self, value):
        """Decodes a dictionary into an instance of the field's class.

        Empty and non-dictionary values are returned unchanged, so nullable
        relations stay `None`.

        """
        return remoteresources.resource.includes_one(self.cls, value)

    def encode(self, value):
        if hasattr(value, 'to_dict'):
            return value.to_dict()
        return value


class List(Field):

    """A field representing a homogeneous embedded collection.

    The elements of the collection are decoded through another field
    specified when the `List` is declared.

    """

    def __init__(self, fld, collection_class=remoteresources.collection.Collection,
                 **kwargs):
        """Sets the type of field representing the content of the list.

        Parameter `fld` is another field instance representing the list's
        content, usually an `Object` field. Optional parameter
        `collection_class` is the container made for the decoded elements;
        `None` makes a plain list.

        """
        super(List, self).__init__(**kwargs)
        self.fld = fld
        self.collection_class = collection_class

    def install(self, attrname, cls):
        super(List, self).install(attrname, cls)

        # Make sure our content field knows its owner too.
        self.fld.install(attrname, cls)

    def decode(self, value):
        """Decodes a list of API values into a collection of decoded
        values. An empty or absent list yields an empty collection."""
        return remoteresources.collection.build_collection(
            getattr(self.fld, 'cls', None), value,
            collection_class=self.collection_class, decode=self.fld.decode)

    def encode(self, value):
        if value is None:
            return None
        return [self.fld.encode(v) for v in value]


class Datetime(Field):

    """A field representing a timestamp."""

    dateformat = "%Y-%m-%dT%H:%M:%SZ"
    fallback_formats = ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%d %H:%M:%S")

    def __init__(self, dateformat=None, **kwargs):
        super(Datetime, self).__init__(**kwargs)
        if dateformat is not None:
            self.dateformat = dateformat

    def decode(self, value):
        """Decodes a timestamp string into a `datetime` with UTC tzinfo.

        Timestamp strings should be of the field's format, by default
        ``YYYY-MM-DDTHH:MM:SSZ``. Timestamps with a UTC offset are converted
        to UTC.

        """
        if value is None:
            return None
        for dateformat in (self.dateformat,) + self.fallback_formats:
            try:
                parsed = datetime.strptime(value, dateformat)
            except (TypeError, ValueError):
                continue
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        raise TypeError('Value to decode %r is not a valid date time stamp' % (value,))

    def encode(self, value):
        """Encodes a `datetime` into a timestamp string of the field's
        format. Naive datetimes are taken to be UTC already, and strings are
        taken to be encoded already."""
        if value is None or isinstance(value, str):
            return value
        if not isinstance(value, datetime):
            raise TypeError('Value to encode %r is not a datetime' % (value,))
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(microsecond=0).strftime(self.dateformat)
