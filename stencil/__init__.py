"""stencil -- generate projects from template directories."""

__version__ = "0.1.0"
