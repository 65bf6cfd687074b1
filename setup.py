# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="tailspin",
    version="0.3.0",
    description="A small Scheme-like interpreter with loop/recur tail calls",
    packages=find_namespace_packages(include=["tailspin*", "tailspin_lsp*"]),
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "tailspin=tailspin.__main__:main",
            "tailspin-ls=tailspin_lsp.server:ls.start_io",
        ],
    },
    zip_safe=False,
)
