# setup.py
from setuptools import setup, find_packages

setup(
    name="seo_scout",
    version="1.0.0",
    description="SEO Scout: sitemap-driven SEO analysis with environment and git comparisons",
    packages=find_packages(exclude=["tests", "tests.*"]),  # seo_scout and its subpackages
    package_data={"seo_scout.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "click>=8.1",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1",
        "rich>=13.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "seo-scout=seo_scout.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
