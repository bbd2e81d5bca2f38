# setup.py
from setuptools import setup, find_packages

setup(
    name="stackcalc",
    version="0.1.0",
    description="A small postfix, stack-based language with a standard prelude",
    packages=find_packages(include=["stackcalc", "stackcalc.*", "stackcalc_repl", "stackcalc_repl.*"]),
    package_data={"stackcalc": ["prelude/*.calc"]},
    python_requires=">=3.9",
    install_requires=[
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "stackcalc = stackcalc_repl.console:main",
            "stackcalc-server = stackcalc_repl.repl_server:main",
        ],
    },
    zip_safe=False,
)
