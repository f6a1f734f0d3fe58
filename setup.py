from setuptools import find_packages, setup

setup(
    name="shadow-trader",
    version="0.1.0",
    packages=find_packages(include=["shadow_trader", "shadow_trader.*"]),
    install_requires=[
        "anthropic>=0.40.0",
        "mcp>=1.2.0,<2",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "requests>=2.26.0",
        "tenacity>=8.0.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
            "pytest-cov",
            "responses",
            "httpx",
        ]
    },
    entry_points={
        "console_scripts": [
            "shadow-trader=shadow_trader.server:main",
        ],
    },
    python_requires=">=3.10",
    description="Behavioral pattern learning for whale wallets, served over MCP",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
