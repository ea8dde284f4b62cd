"""polarway - Reversible dotfiles provisioning for a Hyprland desktop."""

__version__ = "0.3.0"
