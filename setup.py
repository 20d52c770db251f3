#!/usr/bin/env python

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

requirements = ['openpyxl', 'requests', 'beautifulsoup4', 'Pillow',
        'cssutils', 'webcolors', 'chardet', 'PyYAML']

test_requirements = ['pytest>=3', ]

setup(
    author="report2xlsx developers",
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    description="Convert html reports saved as xls/mht into real xlsx files",
    entry_points={
        'console_scripts': [
            'report2xlsx=report2xlsx.cli:main',
        ],
    },
    install_requires=requirements,
    extras_require={'test': test_requirements},
    license="MIT license",
    long_description=readme + '\n\n' + history,
    long_description_content_type='text/x-rst',
    include_package_data=True,
    keywords='report2xlsx',
    name='report2xlsx',
    packages=find_packages(include=['report2xlsx', 'report2xlsx.*']),
    test_suite='tests',
    tests_require=test_requirements,
    version='0.1.0',
    zip_safe=False,
)
