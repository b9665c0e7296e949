from setuptools import setup, find_packages


def parse_requirements(filename):
    result = []
    with open(filename, "r", encoding="utf-8") as f:
        for line in (line.strip() for line in f):
            if not line or line.startswith("#"):
                continue

            if line.startswith("-r"):
                _, filename = line.split(" ", 1)
                result.extend(parse_requirements(filename))
            else:
                result.append(line)

    return result


with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="deployctl",
    version="0.1.0",
    description="Command line client to manage deployments and projects of the cloud platform",
    install_requires=parse_requirements("requirements-prod.txt"),
    extras_require={"test": parse_requirements("requirements-test.txt")},
    entry_points={"console_scripts": ["deployctl=deployctl.app:main"]},
    packages=find_packages(exclude=["*tests*"]),
    long_description_content_type="text/markdown",
    long_description=long_description,
    python_requires=">=3.8",
)
