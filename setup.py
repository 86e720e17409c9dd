#!/usr/bin/env python
from setuptools import find_packages, setup

setup(
    name="watermark-tools",
    version="0.1.0",
    description="Composite image and text watermarks onto images.",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "attrs>=22.2.0",
        "numpy",
        "Pillow>=10.1.0",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["watermark-tools=watermark_tools.__main__:main"],
    },
)
