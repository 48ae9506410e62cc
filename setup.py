import os
import re

from setuptools import find_packages, setup

VERSION = '0.14.0'


def parse_md_readme():
    """
    read the long description from the readme if it is present
    """
    try:
        with open(os.path.join(os.path.dirname(__file__), 'README.md')) as fh:
            long_description = fh.read()
    except OSError:
        long_description = ''
    return re.sub(r'\r\n', '\n', long_description)


TEST_REQS = [
    'timeout-decorator>=0.3.3',
    'coverage>=4.2',
    'pycodestyle>=2.3.1',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand>=0.1.2',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='pairfq',
    version='{}'.format(VERSION),
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Sync paired-end sequences from separate FastA/Q files',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.6',
    test_suite='tests',
    entry_points={
        'console_scripts': [
            'pairfq = pairfq.main:main',
            'pairs_to_interleaved = pairfq.main:interleave_main',
        ]
    },
)
