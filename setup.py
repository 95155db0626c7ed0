from setuptools import setup

setup(
    url='none',
    name='txcasclient',
    version='0.1',
    description='Client for the CAS single sign-on "validate" protocol.',
    packages=[
        'txcasclient', 'txcasclient.test',
    ],
    install_requires=[
        'klein',
        'requests',
        'Twisted>=16.0.0',
        'zope.interface',
    ],
    extras_require={
        'test': ['mock'],
    },
)
