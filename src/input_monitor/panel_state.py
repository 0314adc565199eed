"""
PanelState - snapshot of named button states with calculated derived fields
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class PanelState:
    """
    Snapshot of every button on a panel with automatic edge detection.

    Usage:
        state = panel.read_state()
        if state.was_changed["select"] and state.for_button["select"]:
            print("select pressed")
    """
    for_button: Dict[str, bool]          # Current state: name -> pressed
    previous_state_of: Dict[str, bool]   # State at the previous read

    # Calculated fields (not in constructor, computed automatically)
    was_changed: Dict[str, bool] = field(init=False)
    total_buttons_pressed: int = field(init=False)
    any_changed: bool = field(init=False)

    def __post_init__(self):
        if not isinstance(self.for_button, dict):
            raise TypeError("for_button must be a dict of name -> bool")
        if not isinstance(self.previous_state_of, dict):
            raise TypeError("previous_state_of must be a dict of name -> bool")
        if set(self.for_button) != set(self.previous_state_of):
            raise ValueError(
                f"State dicts must name the same buttons: "
                f"for_button={sorted(self.for_button)}, previous_state_of={sorted(self.previous_state_of)}"
            )
        if not all(isinstance(x, bool) for x in self.for_button.values()):
            raise TypeError("All values in for_button must be bool")
        if not all(isinstance(x, bool) for x in self.previous_state_of.values()):
            raise TypeError("All values in previous_state_of must be bool")

        self.was_changed = {
            name: self.previous_state_of[name] != pressed
            for name, pressed in self.for_button.items()
        }
        self.total_buttons_pressed = sum(self.for_button.values())
        self.any_changed = any(self.was_changed.values())

    def just_pressed(self) -> List[str]:
        """Buttons that went down since the previous read"""
        return [name for name, pressed in self.for_button.items() if pressed and self.was_changed[name]]

    def just_released(self) -> List[str]:
        """Buttons that came up since the previous read"""
        return [name for name, pressed in self.for_button.items() if not pressed and self.was_changed[name]]

    def get_button_count(self) -> int:
        return len(self.for_button)

    def __str__(self) -> str:
        pressed_buttons = [name for name, pressed in self.for_button.items() if pressed]
        changed_buttons = [name for name, changed in self.was_changed.items() if changed]

        return (
            f"PanelState("
            f"pressed={pressed_buttons}, "
            f"changed={changed_buttons}, "
            f"total_pressed={self.total_buttons_pressed}"
            f")"
        )
