"""Link installation and ownership-checked removal."""

from polarway.links.installer import LinkInstaller

__all__ = ["LinkInstaller"]
