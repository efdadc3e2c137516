from setuptools import setup

setup(
    name="emmetpy",
    version="0.1.0",
    description="Expands emmet-style abbreviations into HTML/XML markup",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['emmetpy'],
    python_requires=">=3.8",
    install_requires=[
        "watchdog",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["emmetpy=emmetpy.__main__:main"],
    },
)
