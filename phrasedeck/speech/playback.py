"""Hand a synthesized audio file to the operating system's player."""

import os
import platform
import subprocess


def play_audio_file(file_path: str) -> None:
    """
    Start playback of ``file_path`` without waiting for it to finish.

    Raises:
        OSError: If no player could be launched
    """
    abs_path = os.path.abspath(file_path)
    system = platform.system()
    if system == "Windows":
        os.startfile(abs_path)
    elif system == "Darwin":
        subprocess.Popen(["afplay", abs_path])
    else:
        subprocess.Popen(["xdg-open", abs_path])
