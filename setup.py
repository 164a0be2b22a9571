from setuptools import setup, find_packages

setup(
    name="portfolio-rebalancer",
    version="1.0.0",
    author="Portfolio Rebalancer Team",
    description="Stock portfolio rebalancing calculator with target allocations and trade recommendations",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "portfolio_models": ["py.typed"],
        "rebalance_calculator": ["py.typed"],
    },
    install_requires=[
        "pydantic>=2.11,<3",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "portfolio-rebalancer=rebalancer_cli.main:run",
        ],
    },
    python_requires=">=3.11",
)
