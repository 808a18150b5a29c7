"""
mdbuild - Build-time content pipeline for a Markdown blog

Turns a directory of <date>--<slug>/index.md posts into rendered HTML
modules, AVIF/WebP/baseline images, a generated metadata module and a
sitemap, through a bundler plugin (MdBuild) and a small local host.
"""

__version__ = "1.0.0"
__author__ = "Dale Chapman"
__license__ = "MIT"

from .errors import MdBuildError, ConfigurationError

__all__ = [
    "__version__",
    "MdBuildError",
    "ConfigurationError",
]
