from setuptools import find_packages, setup

VERSION = '1.0.0'


TEST_REQS = [
    'timeout-decorator>=0.3.3',
    'coverage>=4.2',
    'pycodestyle>=2.3.1',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand>=0.1.2',
    'mavis_config>=1.1.0',
    'pandas>=1.1',
    'shortuuid>=0.5.0',
    'snakemake>=6.1.1',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='svcompare',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages(where='src', exclude=['tests']),
    package_data={'svcompare': ['schemas/*.json']},
    description='Comparison of structural variant calls from optical mapping and sequencing based callers',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.7',
    test_suite='tests',
    entry_points={'console_scripts': ['svcompare = svcompare.main:main']},
)
