"""
Editor Configuration Module.
Defines configuration settings for shape editing on the map.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class EditorConfig:
    """
    Configuration settings for the shape editor.

    Attributes:
        markers_visible: Whether vertex handles are shown when a shape is built.
        z_index: Stacking order applied to built shapes and their handles
            (None = leave the surface default).
        log_dir: Directory for the rotating log file.
        debug_mode: Whether to log at DEBUG level.
    """

    markers_visible: bool = True
    z_index: Optional[float] = None
    log_dir: str = "logs"
    debug_mode: bool = False

    def to_dict(self) -> dict:
        """
        Converts the config to a dictionary for JSON serialization.

        Returns:
            dict: Dictionary representation of the configuration.
        """
        return {
            "markers_visible": self.markers_visible,
            "z_index": self.z_index,
            "log_dir": self.log_dir,
            "debug_mode": self.debug_mode,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EditorConfig":
        """
        Creates an EditorConfig from a dictionary.

        Args:
            data: Dictionary containing configuration values.

        Returns:
            EditorConfig: A new EditorConfig instance.
        """
        z_index = data.get("z_index")
        return cls(
            markers_visible=data.get("markers_visible", True),
            z_index=float(z_index) if z_index is not None else None,
            log_dir=data.get("log_dir", "logs"),
            debug_mode=data.get("debug_mode", False),
        )
