"""
Setup script for the ShareBudget configuration core.

Usage:
    pip install -e .[test]

Installs the `config`, `storage` and `app` packages plus the
`share-budget` console entry point.
"""
from setuptools import setup

setup(
    name='sharebudget-core',
    version='1.0.0',
    description='Environment-scoped configuration and sync checkpoints for ShareBudget',
    python_requires='>=3.9',
    packages=[
        'config',
        'storage',
        'app',
    ],
    py_modules=['share_budget'],
    install_requires=[
        'python-dotenv>=1.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'share-budget=share_budget:main',
        ],
    },
)
