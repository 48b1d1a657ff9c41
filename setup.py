from setuptools import setup, find_packages

setup(
    name="hmtrace",
    version="0.1.0",
    description="hmtrace — step-by-step Hindley-Milner type inference tracer",
    packages=find_packages(include=["hmtrace", "hmtrace.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hmtrace=hmtrace.cli:main",
        ],
    },
)
