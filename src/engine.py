from config import Config, ConfigError, NAME_TO_LOGGING_LEVEL, load_config
from dictionary import Dictionary, DictionaryIOError
from henkan import Command, ConversionEngine, EngineState
from key_mapping import Modifiers, is_toggle_key, map_key
from user_dictionary import UserDictionary
import util

import logging

import gi
gi.require_version('IBus', '1.0')
from gi.repository import IBus
# http://lazka.github.io/pgi-docs/IBus-1.0/index.html

logger = logging.getLogger(__name__)

# Only the direct input- and Hiragana-mode are supported (and that's intentional).
INPUT_MODE_NAMES = ('A', 'あ')

LOOKUP_TABLE_PAGE_SIZE = 9


class EngineJapinput(IBus.Engine):
    '''
    IBus front end of ConversionEngine.

    Key events are mapped to engine commands by key_mapping.map_key(); the
    EngineOutput of every command is rendered as committed text, an underlined
    preedit and, while converting, the lookup table. All calls arrive on the
    GLib main loop, so the engine is only ever touched from one thread.

    http://lazka.github.io/pgi-docs/IBus-1.0/classes/Engine.html
    '''
    __gtype_name__ = 'EngineJapinput'

    def __init__(self):
        super().__init__()
        self._mode = 'あ'  # _mode must be one of INPUT_MODE_NAMES

        self._lookup_table = IBus.LookupTable.new(LOOKUP_TABLE_PAGE_SIZE, 0, True, True)
        self._lookup_table.set_orientation(IBus.Orientation.VERTICAL)

        self._load_configs()
        self._engine = ConversionEngine(self._load_system_dictionary(),
                                        self._load_user_dictionary())
        self._init_props()

    # ─── Loading ──────────────────────────────────────────────────────────

    def _load_configs(self):
        '''
        Load config.json from the per-user config directory.
        A broken config file is logged and the defaults are used instead.
        '''
        path = util.get_user_config_path()
        try:
            self._config = load_config(path)
        except ConfigError as e:
            logger.error(f'Error loading {path}: {e}. Using the default configuration')
            self._config = Config()
        logging.getLogger().setLevel(NAME_TO_LOGGING_LEVEL[self._config.logging_level])
        logger.info(f'logging_level: {self._config.logging_level}')

    def _load_system_dictionary(self):
        path = util.get_system_dictionary_path(self._config)
        try:
            return Dictionary.load(path)
        except DictionaryIOError as e:
            logger.error(f'Conversion disabled, system dictionary unavailable: {e}')
            return None

    def _load_user_dictionary(self):
        if not self._config.auto_learn:
            logger.info('auto_learn is off; no user dictionary')
            return None
        try:
            return UserDictionary.load(util.get_user_dictionary_path())
        except DictionaryIOError as e:
            logger.error(f'Learning disabled, user dictionary unavailable: {e}')
            return None

    def _save_user_dictionary(self):
        user_dictionary = self._engine.user_dictionary
        if user_dictionary is None or not user_dictionary.is_dirty():
            return
        try:
            user_dictionary.save(util.get_user_dictionary_path())
        except DictionaryIOError as e:
            logger.error(f'Failed to save the user dictionary: {e}')

    # ─── Properties (input mode menu) ─────────────────────────────────────

    def _init_props(self):
        '''
        Create the input mode menu shown in the panel.

        http://lazka.github.io/pgi-docs/IBus-1.0/classes/PropList.html
        '''
        self._prop_list = IBus.PropList()
        self._input_mode_prop = IBus.Property(
            key='InputMode',
            prop_type=IBus.PropType.MENU,
            symbol=IBus.Text.new_from_string(self._mode),
            label=IBus.Text.new_from_string(f"Input mode ({self._mode})"),
            icon=None,
            tooltip=None,
            sensitive=True,
            visible=True,
            state=IBus.PropState.UNCHECKED,
            sub_props=None)
        sub_props = IBus.PropList()
        for key, label, mode in (('InputMode.Alphanumeric', "Alphanumeric (A)", 'A'),
                                 ('InputMode.Hiragana', "Hiragana (あ)", 'あ')):
            sub_props.append(IBus.Property(
                key=key,
                prop_type=IBus.PropType.RADIO,
                label=IBus.Text.new_from_string(label),
                icon=None,
                tooltip=None,
                sensitive=True,
                visible=True,
                state=IBus.PropState.CHECKED if mode == self._mode else IBus.PropState.UNCHECKED,
                sub_props=None))
        self._input_mode_prop.set_sub_props(sub_props)
        self._prop_list.append(self._input_mode_prop)

    def _update_input_mode(self):
        self._input_mode_prop.set_symbol(IBus.Text.new_from_string(self._mode))
        self._input_mode_prop.set_label(IBus.Text.new_from_string(f"Input mode ({self._mode})"))
        self.update_property(self._input_mode_prop)

    def set_mode(self, mode):
        '''
        Switch between direct input ('A') and Hiragana ('あ').
        Any composition in progress is committed as it is displayed.
        '''
        if self._mode == mode or mode not in INPUT_MODE_NAMES:
            return False
        logger.debug(f'set_mode({mode})')
        self._commit_display()
        self._mode = mode
        self._update_input_mode()
        return True

    def do_property_activate(self, prop_name, state):
        logger.info(f'property_activate({prop_name}, {state})')
        if prop_name.startswith('InputMode.') and state == IBus.PropState.CHECKED:
            mode = {
                'InputMode.Alphanumeric': 'A',
                'InputMode.Hiragana': 'あ',
            }.get(prop_name, 'A')
            self.set_mode(mode)

    # ─── Key events ───────────────────────────────────────────────────────

    def do_process_key_event(self, keyval, keycode, state):
        if state & IBus.ModifierType.RELEASE_MASK:
            return False

        modifiers = Modifiers(
            shift=bool(state & IBus.ModifierType.SHIFT_MASK),
            ctrl=bool(state & IBus.ModifierType.CONTROL_MASK),
            alt=bool(state & IBus.ModifierType.MOD1_MASK))

        if is_toggle_key(keyval, modifiers, self._config.toggle_key):
            self.set_mode('A' if self._mode == 'あ' else 'あ')
            return True

        command = map_key(keyval, modifiers, self._mode == 'あ', self._config.keybind)
        if command is None:
            return False

        was_direct = self._engine.state is EngineState.DIRECT
        output = self._engine.process(command)
        self._render(output)
        # keys like Return or Space only belong to us while there is input
        return not (was_direct and self._engine.state is EngineState.DIRECT and not output.committed)

    def do_candidate_clicked(self, index, button, state):
        candidate_list = self._engine.candidate_list
        if candidate_list is None:
            return
        page_start = self._lookup_table.get_cursor_pos() - self._lookup_table.get_cursor_in_page()
        if candidate_list.set_index(page_start + index):
            self._render(self._engine.process(Command.COMMIT))

    # ─── Rendering ────────────────────────────────────────────────────────

    def _render(self, output):
        if output.committed:
            logger.debug(f'commit_text("{output.committed}")')
            self.commit_text(IBus.Text.new_from_string(output.committed))
        self._update_preedit(output.display)
        self._update_lookup_table(output.candidate_index)

    def _update_preedit(self, display):
        if not display:
            self.hide_preedit_text()
            return
        text = IBus.Text.new_from_string(display)
        text.append_attribute(IBus.AttrType.UNDERLINE, IBus.AttrUnderline.SINGLE, 0, len(display))
        self.update_preedit_text(text, len(display), True)

    def _update_lookup_table(self, candidate_index):
        candidates = self._engine.candidates
        if candidates is None or candidate_index is None:
            self._lookup_table.clear()
            self.hide_lookup_table()
            return
        self._lookup_table.clear()
        for candidate in candidates:
            self._lookup_table.append_candidate(IBus.Text.new_from_string(candidate))
        self._lookup_table.set_cursor_pos(candidate_index)
        self.update_lookup_table(self._lookup_table, True)

    def _commit_display(self):
        '''Commit the selected candidate or the composed kana, as Return would.'''
        self._render(self._engine.process(Command.COMMIT))

    # ─── Focus and lifecycle ──────────────────────────────────────────────

    def do_focus_in(self):
        self.register_properties(self._prop_list)
        self._update_preedit('')

    def do_focus_out(self):
        self._engine.reset()
        self._update_preedit('')
        self._update_lookup_table(None)

    def do_reset(self):
        self._engine.reset()
        self._update_preedit('')
        self._update_lookup_table(None)

    def do_enable(self):
        # Request the initial surrounding-text in addition to the "enable" handler.
        self.get_surrounding_text()

    def do_disable(self):
        self._engine.reset()
        self._save_user_dictionary()

    def do_destroy(self):
        self._save_user_dictionary()
        super().do_destroy()
