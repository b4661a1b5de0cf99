# /setup.py
"""
Setup configuration for composedash.
"""
from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read version from composedash.py
with open('composedash/composedash.py', 'r') as f:
    for line in f:
        if line.startswith('VERSION'):
            version = line.split('=')[1].strip().strip('"\'')
            break

# Read README
readme = Path(__file__).parent / 'README.md'
long_description = readme.read_text() if readme.exists() else ''

setup(
    name='composedash',
    version=version,
    description='Interactive terminal dashboard for compose-defined containers',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_namespace_packages(include=['composedash', 'composedash.*']),
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'click>=8.1.7',
        'rich>=13.7.0',
        'pyyaml>=6.0.1',
        'python-dotenv>=1.0.0'
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0'
        ]
    },
    entry_points={
        'console_scripts': [
            'composedash=composedash:cli'
        ]
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: System :: Systems Administration',
        'Topic :: Software Development :: Build Tools',
    ],
    keywords='docker-compose, containers, logs, dashboard, terminal',
    zip_safe=False,
)
