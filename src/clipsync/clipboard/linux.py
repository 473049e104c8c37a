import os
import shutil
import subprocess
from typing import List, Optional

from clipsync.clipboard.base import ClipboardBackend
from clipsync.exceptions import ClipboardAccessError


class LinuxClipboard(ClipboardBackend):
    """wl-clipboard on Wayland, xclip on X11."""

    def _has_wayland(self) -> bool:
        return bool(os.environ.get("WAYLAND_DISPLAY")) and bool(shutil.which("wl-paste"))

    def _read(self, primary: bool) -> str:
        if self._has_wayland():
            command = ["wl-paste", "--no-newline"]
            if primary:
                command.append("--primary")
        elif shutil.which("xclip"):
            selection = "primary" if primary else "clipboard"
            command = ["xclip", "-selection", selection, "-o"]
        else:
            raise ClipboardAccessError("Neither wl-paste nor xclip is available")

        output = self._run_command(command, timeout=1.5)
        if output is None:
            # both tools exit non-zero on an empty selection
            return ""
        return output.decode("utf-8", errors="ignore")

    def read_text(self) -> str:
        return self._read(primary=False)

    def read_selection(self) -> str:
        return self._read(primary=True)

    def write_text(self, text: str) -> None:
        if shutil.which("wl-copy") and os.environ.get("WAYLAND_DISPLAY"):
            command = ["wl-copy"]
        elif shutil.which("xclip"):
            command = ["xclip", "-selection", "clipboard"]
        else:
            raise ClipboardAccessError("Neither wl-copy nor xclip is available")

        try:
            subprocess.run(
                command,
                input=text.encode("utf-8"),
                check=True,
                timeout=2.0,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise ClipboardAccessError(f"Clipboard write failed: {e}") from e

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except subprocess.CalledProcessError:
            return None
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ClipboardAccessError(f"{command[0]} failed: {e}") from e
