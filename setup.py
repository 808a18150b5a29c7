"""
mdbuild - Build-time content pipeline for a Markdown blog

Installation:
    pip install -e .

This installs the 'mdbuild' command in your environment.
"""

from setuptools import setup, find_packages
import os

# Read README for long description
long_description = ''
if os.path.exists('README.md'):
    with open('README.md', 'r', encoding='utf-8') as f:
        long_description = f.read()

setup(
    name='mdbuild',
    version='1.0.0',
    description='Turn a directory of Markdown posts into versioned static assets',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Dale Chapman',
    author_email='',
    license='MIT',

    packages=find_packages(exclude=['tests', 'tests.*', 'docs', 'content']),

    include_package_data=True,

    python_requires='>=3.9',

    # Dependencies
    install_requires=[
        'click>=8.0',
        'python-frontmatter>=1.0',
        'PyYAML>=6.0',
        'watchdog>=3.0',
        'markdown>=3.4',
        'Pygments>=2.15',
        'pymdown-extensions>=10.0',
        'Pillow>=11.3',
    ],

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.4',
            'pytest-cov>=4.1',
            'pytest-mock>=3.11',
        ],
    },

    # CLI entry point - this creates the 'mdbuild' command
    entry_points={
        'console_scripts': [
            'mdbuild=mdbuild.cli:cli',
        ],
    },

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP :: Site Management',
    ],

    keywords='markdown static-site blog images avif webp sitemap',
)
