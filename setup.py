import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="ethereum-evm-args",
    version="0.1.0",
    description="Command-line EVM options merged into a layered, profile-based configuration",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.11",
    packages=setuptools.find_packages(
        include=[
            "ethereum_evm_base_types*",
            "ethereum_evm_config*",
            "ethereum_evm_args*",
            "cli*",
        ]
    ),
    install_requires=[
        "click>=8.1.0,<9",
        "pydantic>=2.8.0,<3",
        "pycryptodome>=3.20.0,<4",
        "PyYAML>=6.0.2,<7",
        "rich>=13.7.0,<15",
    ],
    extras_require={
        "test": [
            "pytest>=8,<9",
        ],
    },
    entry_points={
        "console_scripts": [
            "evm-config=cli.evm_config:evm_config",
        ],
    },
)
