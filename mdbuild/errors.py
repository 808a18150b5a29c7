# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
Custom exception classes with readable error messages for mdbuild

All exceptions include:
- Clear error description
- Actionable suggestions
- Relevant context

Every error is fatal for the build: there is no per-post isolation, a
single bad post fails the whole site.
"""
from pathlib import Path
from typing import Optional, Dict, Any


class MdBuildError(Exception):
    """Base exception for all mdbuild errors"""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error with all details"""
        lines = [
            "",
            "=" * 70,
            f"{self.__class__.__name__}",
            "=" * 70,
            "",
            self.message,
        ]

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append("")
            lines.append("Suggestion:")
            lines.append(f"  {self.suggestion}")

        if self.cause:
            lines.append("")
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        lines.append("")
        lines.append("=" * 70)
        lines.append("")

        return "\n".join(lines)


class ConfigurationError(MdBuildError):
    """Configuration is missing or invalid"""
    pass


class InputLayoutError(MdBuildError):
    """Content root does not follow the <date>--<slug>/index.md layout"""
    pass


class ParseError(MdBuildError):
    """Front matter or Markdown could not be parsed"""
    pass


class ConversionError(MdBuildError):
    """Image codec failed to re-encode a source image"""
    pass


class BuildIOError(MdBuildError):
    """Cache, content or output location could not be read or written"""
    pass


# Specific error factory functions

def missing_content_root_error(content_root: Path, cause: Optional[Exception] = None) -> BuildIOError:
    """Create error when the content root cannot be listed"""
    return BuildIOError(
        message=f"Content root is not a readable directory: {content_root}",
        suggestion=(
            "Create the directory or point mdbuild at it:\n"
            "  mdbuild build --content-dir content/posts\n\n"
            "Or set content_dir in mdbuild.yaml"
        ),
        context={"content_root": str(content_root)},
        cause=cause
    )


def invalid_dir_name_error(folder: Path) -> InputLayoutError:
    """Create error for a post directory without a <date>--<slug> name"""
    return InputLayoutError(
        message=f"Post directory name must look like <date>--<slug>: {folder.name}",
        suggestion=(
            "Rename the directory, for example:\n"
            f"  2021-01-01--{folder.name or 'my-post'}"
        ),
        context={"folder": str(folder)}
    )


def missing_index_error(folder: Path, cause: Optional[Exception] = None) -> InputLayoutError:
    """Create error when a post directory has no index.md"""
    return InputLayoutError(
        message=f"Post directory has no index.md: {folder.name}",
        suggestion="Every post directory needs an index.md with front matter and a Markdown body",
        context={"folder": str(folder), "expected": str(folder / "index.md")},
        cause=cause
    )


def missing_image_error(image_path: Path, referenced_in: Optional[Path] = None) -> InputLayoutError:
    """Create error when a cover or embedded image does not exist"""
    context = {"image": str(image_path)}
    if referenced_in is not None:
        context["referenced_in"] = str(referenced_in)
    return InputLayoutError(
        message=f"Image file not found: {image_path.name}",
        suggestion=(
            "Check the 'cover' front matter key or the image reference in the\n"
            "  Markdown body; paths are relative to the post directory"
        ),
        context=context
    )


def invalid_frontmatter_error(
    file_path: Path,
    missing_fields: list[str],
    required_fields: list[str]
) -> ParseError:
    """Create error for front matter missing required keys"""
    return ParseError(
        message=f"Invalid front matter in {file_path}",
        suggestion=(
            "Add required fields to front matter:\n"
            "  ---\n" +
            "\n".join(f'  {field}: "value"' for field in missing_fields) +
            "\n  ---"
        ),
        context={
            "file": str(file_path),
            "missing_fields": missing_fields,
            "required_fields": required_fields
        }
    )


def malformed_frontmatter_error(file_path: Optional[Path], cause: Optional[Exception] = None) -> ParseError:
    """Create error for front matter that cannot be split or parsed"""
    return ParseError(
        message=f"Malformed front matter in {file_path or '<string>'}",
        suggestion=(
            "Front matter must open and close with '---' lines and contain\n"
            "  valid YAML key/value pairs"
        ),
        context={"file": str(file_path) if file_path else "<string>"},
        cause=cause
    )


def conversion_error(source: Path, image_format: str, cause: Optional[Exception] = None) -> ConversionError:
    """Create error when an image cannot be re-encoded"""
    return ConversionError(
        message=f"Failed to convert {source.name} to {image_format}",
        suggestion=(
            "Check that the file is a valid image and that Pillow was built\n"
            "  with support for the target format (AVIF needs Pillow >= 11.3)"
        ),
        context={"source": str(source), "format": image_format},
        cause=cause
    )


def unwritable_path_error(path: Path, cause: Optional[Exception] = None) -> BuildIOError:
    """Create error when the cache or output location cannot be written"""
    return BuildIOError(
        message=f"Cannot write to {path}",
        suggestion="Check permissions and free space, or choose another directory",
        context={"path": str(path)},
        cause=cause
    )
