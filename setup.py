#!/usr/bin/env python3
from setuptools import setup, find_packages

setup(
    name='cameraunit',
    version='0.3',
    description='image data, FITS output and exposure control for scientific cameras',
    packages=find_packages(include=['cameraunit', 'cameraunit.*']),
    python_requires='>=3.10',
    install_requires=[
        'astropy',
        'numpy',
        'pydantic>=2',
        'PyYAML',
        'Pillow',
        'single-source',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'pytest-mock',
        ]
    }
)
