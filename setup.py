"""SignalBoost Engine Setup"""
from setuptools import setup, find_packages

setup(
    name="signalboost-engine",
    version="1.0.0",
    packages=find_packages(include=['SIGNALBOOST*', 'shared*']),
    python_requires=">=3.10",
    install_requires=[
        "pandas>=2.1.4",
        "numpy>=1.26.2",
        "pydantic>=2.5.3",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
)
