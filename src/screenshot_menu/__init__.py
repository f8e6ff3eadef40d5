"""Screenshot Menu for Wayland/Hyprland.

A rofi-driven screenshot helper built on grimblast:
- Immediate or delayed capture with a coalesced countdown
- Full screen, active output, or selected area
- Copy, save, copy & save, or hand off to an editor
- Optional screen freeze (hyprpicker) while selecting an area
"""

__version__ = "1.0.0"
