"""
Single-key terminal input.

Menus are driven one key press at a time. The reader blocks on the next
key and nothing else; it decodes arrow-key escape sequences into Keys.
"""

import os
import sys
from enum import Enum


class Key(str, Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    BACK = "back"
    OTHER = "other"


_CHAR_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "k": Key.UP,
    "K": Key.UP,
    "j": Key.DOWN,
    "J": Key.DOWN,
    "b": Key.BACK,
    "B": Key.BACK,
    "q": Key.BACK,
    "Q": Key.BACK,
    "\x7f": Key.BACK,   # Backspace
    "\x08": Key.BACK,   # Ctrl-H / Backspace on Windows
}

# Final byte of an ANSI cursor sequence (ESC [ A)
_ANSI_ARROWS = {"A": Key.UP, "B": Key.DOWN}

# Second code after the Windows extended-key prefix
_WINDOWS_ARROWS = {"H": Key.UP, "P": Key.DOWN}


def decode_key(char: str) -> Key:
    return _CHAR_KEYS.get(char, Key.OTHER)


class TerminalKeyReader:
    """Reads one key from the real terminal, without echo or line buffering."""
    
    def __call__(self) -> Key:
        if os.name == "nt":
            return self._read_windows()
        return self._read_posix()
    
    @staticmethod
    def _read_windows() -> Key:
        import msvcrt
        
        char = msvcrt.getwch()
        if char in ("\x00", "\xe0"):
            return _WINDOWS_ARROWS.get(msvcrt.getwch(), Key.OTHER)
        if char == "\x1b":
            return Key.BACK
        if char == "\x03":
            raise KeyboardInterrupt
        return decode_key(char)
    
    @staticmethod
    def _read_posix() -> Key:
        import select
        import termios
        import tty
        
        fd = sys.stdin.fileno()
        previous = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            char = os.read(fd, 1).decode("utf-8", errors="ignore")
            if char == "\x1b":
                # A lone Escape has nothing queued behind it
                ready, _, _ = select.select([fd], [], [], 0.05)
                if not ready:
                    return Key.BACK
                sequence = os.read(fd, 2).decode("utf-8", errors="ignore")
                return _ANSI_ARROWS.get(sequence[-1:], Key.OTHER)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, previous)
        
        if char == "\x03":
            raise KeyboardInterrupt
        return decode_key(char)
