# setup.py
from setuptools import setup, find_packages

setup(
    name="course_digest",
    version="0.1.0",
    description="Merged university course descriptions as AsciiDoc, HTML and PDF",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"course_digest": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "course-digest=course_digest.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
