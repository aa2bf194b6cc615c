"""DICOM Insight backend: upload, simulated enhancement and download of DICOM files."""

__version__ = "1.0.0"
