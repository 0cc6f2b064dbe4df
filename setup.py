# -*- coding: utf-8 -*-

# system imports
from setuptools import setup, find_packages  # type: ignore


# proceed with actual install
install_requires = [
    "aiosqlite>=0.17.0",
    "click>=8.0.0",
    "packaging",
    "rich>=9.6.0",
    "typing_extensions",
]

test_requires = [
    "pytest",
    "pytest-asyncio>=0.21",
]

dev_requires = [
    "black",
    "bump2version",
    "flake8",
    "mypy",
    "pre-commit",
    "pytest-cov",
] + test_requires

setup(
    name="litequery",
    author="Max Allan Niklasson",
    version="0.4.0",
    description="Asynchronous helpers for table creation, CRUD and queries on SQLite.",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=install_requires,
    extras_require={
        "test": test_requires,
        "dev": dev_requires,
    },
    zip_safe=False,
    entry_points={
        "console_scripts": ["litequery=litequery.cli:main"],
    },
    python_requires=">=3.8",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Database",
    ],
)
