""" Build script for pip package. """
from setuptools import setup, find_packages

VERSION = "0.1.0"

def readme():
    """ Generate readme file. """
    try:
        with open("./readme.md", encoding="utf8") as file:
            return file.read()
    except IOError:
        return ""


setup(
    name="accipiter",
    version=VERSION,
    description="Resampling and convolution for RGBA images",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 2 - Alpha",
    ],
    packages=find_packages(include=["accipiter", "accipiter.*"]),
    zip_safe=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "numba",
        "psutil",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
)
