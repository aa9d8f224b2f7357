#!/usr/bin/env python3
"""
key_mapping.py - Key event to engine command mapping
キーイベントからエンジンコマンドへの変換

Keyvals are X11/IBus keysyms, so this module does not need PyGObject and can be
tested anywhere. The constants below have the same values as IBus.KEY_*.

キー値はX11/IBusのkeysym。PyGObjectに依存しないため、どこでもテスト可能。

    keysym + Modifiers ──map_key()──► InsertChar / Command / None
                                          (None = let the application have it)
"""

import logging
from collections import namedtuple
from enum import Enum

from henkan import Command, InsertChar

logger = logging.getLogger(__name__)

# ─── Keysyms (same values as IBus.KEY_*) ──────────────────────────────

KEY_SPACE = 0x020
KEY_COMMA = 0x02c
KEY_MINUS = 0x02d
KEY_PERIOD = 0x02e
KEY_0 = 0x030
KEY_9 = 0x039
KEY_UPPER_A = 0x041
KEY_UPPER_Z = 0x05a
KEY_GRAVE = 0x060
KEY_A = 0x061
KEY_Z = 0x07a
KEY_ASCIITILDE = 0x07e
KEY_BACKSPACE = 0xff08
KEY_RETURN = 0xff0d
KEY_ESCAPE = 0xff1b
KEY_ZENKAKU_HANKAKU = 0xff2a
KEY_UP = 0xff52
KEY_DOWN = 0xff54

# Letters that can carry a Ctrl binding
CTRL_BINDABLE_KEYS = ('g', 'h', 'j', 'm', 'n', 'p')

_PUNCTUATION = {
    KEY_MINUS: '-',
    KEY_PERIOD: '.',
    KEY_COMMA: ',',
}

_SPECIAL_KEYS = {
    KEY_SPACE: Command.CONVERT,
    KEY_RETURN: Command.COMMIT,
    KEY_ESCAPE: Command.CANCEL,
    KEY_BACKSPACE: Command.BACKSPACE,
    KEY_DOWN: Command.NEXT_CANDIDATE,
    KEY_UP: Command.PREV_CANDIDATE,
}


class Modifiers(namedtuple('Modifiers', ['shift', 'ctrl', 'alt'])):
    """State of the modifier keys at the time of a key event."""

    __slots__ = ()

    def __new__(cls, shift=False, ctrl=False, alt=False):
        return super().__new__(cls, shift, ctrl, alt)


class KeybindPreset(Enum):
    NONE = 'none'        # no Ctrl bindings (default)
    MINIMAL = 'minimal'  # Ctrl+G/J/M only, rarely conflicts with applications
    EMACS = 'emacs'      # minimal plus Ctrl+H/N/P


class ToggleKey(Enum):
    ZENKAKU_HANKAKU = 'zenkaku-hankaku'
    CTRL_SPACE = 'ctrl-space'
    ALT_TILDE = 'alt-tilde'


def ctrl_key_config_from_preset(preset):
    """
    Build the Ctrl binding table of a preset.

    Returns:
        dict: {letter: Command or None} for every key in CTRL_BINDABLE_KEYS
    """
    table = {key: None for key in CTRL_BINDABLE_KEYS}
    if preset in (KeybindPreset.MINIMAL, KeybindPreset.EMACS):
        table['g'] = Command.CANCEL
        table['j'] = Command.COMMIT
        table['m'] = Command.COMMIT
    if preset is KeybindPreset.EMACS:
        table['h'] = Command.BACKSPACE
        table['n'] = Command.NEXT_CANDIDATE
        table['p'] = Command.PREV_CANDIDATE
    return table


def map_key(keyval, modifiers, ime_on, ctrl_config):
    """
    Translate a key press into an engine command.

    Args:
        keyval: X11/IBus keysym
        modifiers: Modifiers
        ime_on: Whether Japanese input is enabled
        ctrl_config: Ctrl binding table from ctrl_key_config_from_preset()

    Returns:
        InsertChar, Command, or None when the key should go to the application
    """
    if not ime_on:
        return None

    # Alt combinations always belong to the application
    if modifiers.alt:
        return None

    if modifiers.ctrl:
        return _map_ctrl_key(keyval, ctrl_config)

    if KEY_A <= keyval <= KEY_Z or KEY_UPPER_A <= keyval <= KEY_UPPER_Z:
        return InsertChar(chr(keyval))
    if KEY_0 <= keyval <= KEY_9:
        if modifiers.shift:
            return None
        return InsertChar(chr(keyval))
    if keyval in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[keyval]
    if keyval in _PUNCTUATION:
        return InsertChar(_PUNCTUATION[keyval])
    return None


def _map_ctrl_key(keyval, ctrl_config):
    if not (KEY_A <= keyval <= KEY_Z or KEY_UPPER_A <= keyval <= KEY_UPPER_Z):
        return None
    return ctrl_config.get(chr(keyval).lower())


def is_toggle_key(keyval, modifiers, toggle_key):
    """
    Check whether a key press is the configured IME on/off toggle.

    Args:
        keyval: X11/IBus keysym
        modifiers: Modifiers
        toggle_key: ToggleKey
    """
    if toggle_key is ToggleKey.ZENKAKU_HANKAKU:
        return keyval == KEY_ZENKAKU_HANKAKU
    if toggle_key is ToggleKey.CTRL_SPACE:
        return keyval == KEY_SPACE and modifiers.ctrl and not modifiers.alt
    if toggle_key is ToggleKey.ALT_TILDE:
        return keyval in (KEY_GRAVE, KEY_ASCIITILDE) and modifiers.alt and not modifiers.ctrl
    return False
