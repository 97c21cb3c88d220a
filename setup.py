#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import setup

# There are problems running setup.py on Windows if the encoding is not set
with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()
with open('HISTORY.rst', encoding='utf8') as history_file:
    history = history_file.read()
with open('ga4mp/VERSION', encoding='utf8') as version_file:
    version = version_file.read().strip()


setup(
    name='ga4mp',
    version=version,
    description="Collects analytics events and submits them to a Measurement Protocol collector in validated batches.",
    long_description=readme + '\n\n' + history,
    long_description_content_type="text/markdown",
    author="ga4mp contributors",
    packages=[
        'ga4mp',
        'ga4mp.collector',
        'ga4mp.config',
        'ga4mp.models',
        'ga4mp.platform',
    ],
    package_dir={'ga4mp': 'ga4mp'},
    package_data={'ga4mp': ['VERSION']},
    entry_points={
        'console_scripts': [
            'ga4mp=ga4mp.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=[
        'httpx>=0.27',
        'pydantic>=2.0',
        'rich',
        'typer>=0.12',
        'typing-extensions>=4.0',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='analytics measurement-protocol ga4',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
