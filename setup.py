#!/usr/bin/env python
# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup


desc = ('license-normalizer is a small utility library to normalize informal '
        'license names (such as "Apache 2" or "GPL v3") to SPDX license '
        'identifiers and to parse, validate and render license expressions '
        'using boolean logic.')

setup(
    name='license-normalizer',
    version='0.1',
    license='apache-2.0',
    description=desc,
    long_description=desc,
    author='nexB Inc.',
    author_email='info@nexb.com',
    url='https://github.com/aboutcode-org/license-expression',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    package_data={'license_normalizer': ['data/*.json']},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: Apache Software License',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Utilities',
    ],
    keywords=[
        'license', 'spdx', 'license expression', 'open source', 'boolean',
        'parse expression', 'normalize expression', 'normalize license',
        'licence'
    ],
    install_requires=[
        'boolean.py >= 4.0',
    ],
    extras_require={
        'testing': [
            'pytest',
        ],
    },
)
