from setuptools import setup, find_packages

setup(
    name="bgatlas",
    version="0.1.0",
    description="Command-line search client for the Board Game Atlas API",
    packages=find_packages(include=["bgatlas", "bgatlas.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
            "pytest-socket>=0.6",
        ],
    },
    entry_points={
        "console_scripts": ["boardgameatlas=bgatlas.cli:main"],
    },
    license="MIT",
)
