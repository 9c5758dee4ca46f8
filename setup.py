from setuptools import setup, find_packages

setup(
    name="hapsign",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "rich",
        "python-dotenv",
        "toml",
        "rich-argparse",
        "cryptography",
        "json5",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "hapsign=hapsign.cli:main",
            "hapsign-decrypt=hapsign.cli:decrypt_main",
        ],
    },
)
