"""Segment sub-package — manifests written by the capture subsystem."""

from capture_inference.segments.manifest import AudioDescriptor, SegmentManifest, read_manifest

__all__ = ["AudioDescriptor", "SegmentManifest", "read_manifest"]
