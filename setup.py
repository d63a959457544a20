"""
ModelGQL - GraphQL @model/@connection Schema Transformer
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="modelgql",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Expand @model / @connection GraphQL schemas into CRUD APIs and resolver templates",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Diegoproggramer/modelgql",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "graphql-core>=3.2.0",
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    keywords="graphql, schema, transformer, appsync, resolver, vtl, code-generator",
    project_urls={
        "Bug Reports": "https://github.com/Diegoproggramer/modelgql/issues",
        "Source": "https://github.com/Diegoproggramer/modelgql",
    },
)
