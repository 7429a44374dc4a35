#!/usr/bin/env python
from setuptools import setup
setup(
    name='remoteresources',
    version='1.0.0',
    description='ActiveRecord-style objects for RESTful JSON APIs',
    author='Six Apart Ltd.',
    author_email='python@sixapart.com',

    packages=['remoteresources'],
    provides=['remoteresources'],
    install_requires=['simplejson>=2.0.0', 'httplib2>=0.4.0'],
    extras_require={'test': ['mock', 'pytest']},
)
