from setuptools import setup, find_packages
import os

install_requires = ["pydantic>=2.0"]

# Define optional dependencies for development and specific features
extras_require = {"dev": ["pytest"], "lsp": ["pygls>=1.1,<2"]}  # Language Server Protocol support

setup(
    name="pytc",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "pytc = pytc.cli:main",
            "pytc-lsp = pytc.server:start_server",
        ],
    },
    include_package_data=True,
    package_data={},
    description="A static type checker for annotated Python files.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
