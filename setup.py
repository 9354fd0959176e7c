"""
Packaging for the relay module bridge.

Tests live beside the modules they test (`*_test.py`) and under `integrate/`. Run them with
`pytest src integrate` after `pip install -e .[test]`.
"""

from setuptools import setup

setup(
    name='relaybridge',
    version='0.1.0',
    description='Bridges data bus switch paths to Devantech relay modules over TCP and USB serial.',
    url='',
    author='',
    author_email='',
    license='Apache-2.0',
    package_dir={'': 'src'},
    packages=['relaybridge', 'relaybridge.conduit', 'relaybridge.config', 'relaybridge.connector',
              'relaybridge.protocol', 'relaybridge.support'],
    python_requires='>=3.8',
    install_requires=[
        'pyserial>=3.4',
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': ['pytest', 'PyHamcrest>=2.0.3'],
    },
    zip_safe=False,
)
