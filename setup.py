from pathlib import Path

from setuptools import find_packages, setup

BASE_PATH = Path(__file__).resolve().parent


# read the version from the particular file
with open(BASE_PATH / "jobscript" / "version.py", "r") as f:
    exec(f.read())


# read the requirements from requirements.txt
try:
    with open(BASE_PATH / "requirements.txt", "r") as requirements_txt:
        install_requires = [
            line.strip()
            for line in requirements_txt
            if line.strip() and not line.startswith("#")
        ]
except FileNotFoundError:
    # fall-back for conda, where requirements.txt apparently does not work
    print("Cannot find requirements.txt")
    install_requires = ["PyYAML>=5"]


# read the description from the README file
with open(BASE_PATH / "README.md", "r") as fh:
    long_description = fh.read()


setup(
    name="py-jobscript",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"jobscript": ["templates/*.template"]},
    zip_safe=False,
    version=__version__,
    license="MIT",
    description="Generate PBS job scripts from templates and submit them",
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={"test": ["pytest>=6"]},
    entry_points={"console_scripts": ["jobscript=jobscript.__main__:main"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: System :: Clustering",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
)
