"""Client identity sent with every request envelope."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from .constants import ChatMode


class ClientProfile(BaseModel):
    """Opaque client identity and mode settings for the request envelope.

    The defaults mirror the desktop client the service expects; they are
    versioned constants, not derived data.
    """

    os: str = "win32"
    arch: str = "x64"
    version: str = "10.0.22631"
    path: str = "C:\\Program Files\\PowerShell\\7\\pwsh.exe"
    settings_name: str = "cursor\\aisettings"
    chat_mode: str = Field(default="Ask", description="Chat mode name")
    chat_mode_enum: int = Field(default=ChatMode.ASK, ge=0)

    def metadata(self, now: datetime | None = None) -> dict[str, Any]:
        """Return the envelope metadata block with an ISO-8601 timestamp."""
        now = now or datetime.now(timezone.utc)
        return {
            "os": self.os,
            "arch": self.arch,
            "version": self.version,
            "path": self.path,
            "timestamp": now.isoformat(),
        }

    def settings(self) -> dict[str, Any]:
        """Return the envelope settings block."""
        return {
            "name": self.settings_name,
            "unknown3": "",
            "unknown6": {"unknown1": "", "unknown2": ""},
            "unknown8": 1,
            "unknown9": 1,
        }


DEFAULT_PROFILE = ClientProfile()
