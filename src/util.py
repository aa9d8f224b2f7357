import os
from gi.repository import GLib
import logging

logger = logging.getLogger(__name__)


def get_package_name():
    '''
    returns 'ibus-japinput'
    '''
    return 'ibus-japinput'


def get_version():
    return '0.1.0'


def get_prefix():
    '''
    It is usually /usr/local/
    '''
    return '/usr/local'


def get_datadir():
    '''
    Return the path to the data directory under user-independent (central)
    location (= not under the HOME). IBUS_JAPINPUT_DATADIR overrides it.
    '''
    return os.environ.get('IBUS_JAPINPUT_DATADIR',
                          os.path.join(get_prefix(), 'share', get_package_name()))


def get_default_config_path():
    '''
    Return the path to the default config file in the system installation.
    This is the config.json that gets copied to user's home on first run.
    '''
    return os.path.join(get_datadir(), 'config.json')


def get_localedir():
    return os.path.join(get_prefix(), 'share', 'locale')


def get_user_config_dir():
    '''
    Return the path to the config directory under $HOME.
    Typically, it would be $HOME/.config/ibus-japinput
    '''
    return os.path.join(GLib.get_user_config_dir(), get_package_name())


def get_user_config_path():
    return os.path.join(get_user_config_dir(), 'config.json')


def get_log_path():
    return os.path.join(get_user_config_dir(), get_package_name() + '.log')


def get_user_dictionary_path():
    """
    Return the path of the learning user dictionary.
    Typically: $HOME/.config/ibus-japinput/user_dict.txt
    """
    return os.path.join(get_user_config_dir(), 'user_dict.txt')


def get_system_dictionary_path(config=None):
    """
    Return the path of the SKK system dictionary.

    The path configured in config.json wins (a leading ~ is expanded);
    otherwise the dictionary shipped in the data directory is used.

    Args:
        config: Config from config.load_config(), or None
    """
    if config is not None and config.system_dict_path:
        path = os.path.expanduser(config.system_dict_path)
        logger.debug(f'System dictionary from config.json: {path}')
        return path
    return os.path.join(get_datadir(), 'dict', 'SKK-JISYO.L')
