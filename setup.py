from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="FarmAssistant",
    version ="0.1",
    author = "Oluchi-Judith",
    packages = find_packages(exclude=["tests", "tests.*"]),
    install_requires = requirements,
    extras_require = {"test": ["pytest"]},
)
