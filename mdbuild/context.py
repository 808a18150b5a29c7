"""
context.py - Bundler-facing interface handed to the pipeline's hooks

The host implements emit_file/set_asset_source. An asset may be emitted
without a source and filled in later (deferred emission); its reference
id is stable and can be embedded in generated text right away.
"""

from typing import Optional


class PluginContext:
    """What the pipeline needs from the host bundler."""

    def emit_file(
        self,
        type: str,
        name: Optional[str] = None,
        id: Optional[str] = None,
        source: Optional[bytes] = None,
    ) -> str:
        """
        Register an output file and return its reference id.

        Args:
            type: "asset" (binary content) or "chunk" (a module to bundle)
            name: Suggested file name for assets
            id: Module identifier for chunks
            source: Asset bytes, or None to set them later
        """
        raise NotImplementedError

    def set_asset_source(self, ref_id: str, source: bytes) -> None:
        """Fill in the bytes of an asset emitted without a source."""
        raise NotImplementedError
