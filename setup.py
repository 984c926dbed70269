#!/usr/bin/env python

"""The setup script."""

from setuptools import setup, find_packages

with open('README.md') as readme_file:
    readme = readme_file.read()

def load_requirements(filename):
    with open(filename) as file:
        return file.read().splitlines()

requirements = load_requirements("requirements.txt")

test_requirements = load_requirements("test_requirements.txt")

setup(
    author="Octarine",
    author_email='none',
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    description="In-memory REST service managing App resources with JSON/XML content negotiation.",
    install_requires=requirements,
    license="none",
    long_description=readme,
    long_description_content_type="text/markdown",
    include_package_data=True,
    keywords='appstore',
    name='appstore',
    packages=find_packages(include=['appstore', 'appstore.*']),
    extras_require = {
        "test": test_requirements,
    },
    url='none',
    version='0.1.0',
    zip_safe=False,
)
