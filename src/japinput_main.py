"""
japinput_main.py - Entry point for the japinput IME engine
japinput IMEエンジンのエントリーポイント

================================================================================
WHAT THIS FILE DOES / このファイルの役割
================================================================================

When japinput is selected as the input method, the IBus daemon runs this
script. It registers the engine with IBus and runs the GLib main loop.

japinputを入力メソッドとして選択すると、IBusデーモンがこのスクリプトを
実行する。エンジンをIBusに登録し、GLibメインループを実行する。

    IBus daemon starts this script (--ibus)
    IBusデーモンがこのスクリプトを起動
            ↓
    IMApp registers EngineJapinput with IBus
    IMAppがEngineJapinputをIBusに登録
            ↓
    engine.py maps key events to ConversionEngine commands
    engine.pyがキーイベントをConversionEngineのコマンドに変換

Without --ibus the script registers its own IBus component (standalone mode),
which is handy for debugging without restarting the IBus daemon.

--ibusなしの場合は自分でIBusコンポーネントを登録する（スタンドアロンモード）。
IBusデーモンを再起動せずにデバッグするのに便利。

================================================================================
FILE RELATIONSHIPS / ファイルの関係
================================================================================

    japinput_main.py (THIS FILE) ← Entry point, IBus registration
        │
        └──► engine.py           ← IBus adapter (EngineJapinput class)
                  │
                  ├──► henkan.py       (conversion state machine)
                  ├──► key_mapping.py  (key events → commands)
                  ├──► config.py       (config.json)
                  └──► util.py         (paths)

================================================================================
"""

from engine import EngineJapinput
import util

import getopt
import gettext
import os
import locale
import logging
import sys
from shutil import copyfile

import gi
gi.require_version('IBus', '1.0')
from gi.repository import GLib, GObject, IBus


class IMApp:
    """
    IBus Application Wrapper - Manages the connection between japinput and IBus.
    IBusアプリケーションラッパー - japinputとIBus間の接続を管理。

    exec_by_ibus=True (Normal Operation):
        IBus daemon starts us, so we just request our D-Bus name
        IBusデーモンが起動するので、D-Bus名を要求するだけ

    exec_by_ibus=False (Standalone/Development):
        Creates IBus.Component and IBus.EngineDesc and registers them
        IBus.ComponentとIBus.EngineDescを作成して登録
    """

    def __init__(self, exec_by_ibus: bool) -> None:
        if not isinstance(exec_by_ibus, bool):
            raise TypeError("The `exec_by_ibus` parameter must be a boolean value.")
        self.exec_by_ibus = exec_by_ibus

        self._mainloop = GLib.MainLoop()
        self._bus = IBus.Bus()
        # http://lazka.github.io/pgi-docs/GObject-2.0/classes/Object.html#GObject.Object.connect
        self._bus.connect("disconnected", self._bus_disconnected_cb)
        self._factory = IBus.Factory(self._bus)
        self._factory.add_engine("japinput", GObject.type_from_name("EngineJapinput"))
        if exec_by_ibus:
            # http://lazka.github.io/pgi-docs/IBus-1.0/classes/Bus.html#IBus.Bus.request_name
            self._bus.request_name("org.freedesktop.IBus.Japinput", 0)
        else:
            self._component = IBus.Component(
                name="org.freedesktop.IBus.Japinput",
                description="japinput",
                version=util.get_version(),
                license="MIT",
                author="japinput developers",
                homepage="https://github.com/japinput/" + util.get_package_name(),
                textdomain=util.get_package_name())
            engine = IBus.EngineDesc(
                name="japinput",
                longname="japinput",
                description="Romaji kana-kanji conversion",
                language="ja",
                license="MIT",
                author="japinput developers",
                icon=util.get_package_name(),
                layout="default")
            self._component.add_engine(engine)
            self._bus.register_component(self._component)
            self._bus.set_global_engine_async("japinput", -1, None, None, None)

    def run(self):
        """
        Start the main event loop. Blocks until the IBus daemon disconnects.
        メインイベントループを開始。IBusデーモンが切断するまでブロックする。
        """
        self._mainloop.run()

    def _bus_disconnected_cb(self, bus=None):
        self._mainloop.quit()


def print_help(v: int = 0) -> None:
    print("-i, --ibus             executed by IBus.")
    print("-h, --help             show this message.")
    print("-d, --daemonize        daemonize ibus")
    sys.exit(v)


def main():
    """
    Prepare the per-user config directory, configure logging and run IMApp.
    ユーザー設定ディレクトリを準備し、ログを設定してIMAppを実行。

    All user-specific data is stored in: ~/.config/ibus-japinput/
        config.json         - User settings
        user_dict.txt       - Learned conversions
        ibus-japinput.log   - Log file
    """
    os.umask(0o077)

    # Create user specific data directory
    user_configdir = util.get_user_config_dir()
    os.makedirs(user_configdir, 0o700, True)

    # check the config file and copy it from installed directory if it does not exist
    configfile_name = util.get_user_config_path()
    default_config_path = util.get_default_config_path()
    if not os.path.exists(configfile_name) and os.path.exists(default_config_path):
        copyfile(default_config_path, configfile_name)

    # the engine raises or lowers the level once config.json is read
    logging.basicConfig(filename=util.get_log_path(), level=logging.WARNING, format='%(asctime)s %(levelname)-8s %(name)s: %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    logger = logging.getLogger()
    logger.info(f'japinput_main.py user_configdir: {user_configdir}')
    logger.info(f'japinput_main.py util.get_datadir(): {util.get_datadir()}')

    exec_by_ibus = False
    daemonize = False

    shortopt = "ihd"
    longopt = ["ibus", "help", "daemonize"]

    try:
        opts, args = getopt.getopt(sys.argv[1:], shortopt, longopt)
    except getopt.GetoptError as err:
        logger.error(err)
        sys.exit(1)

    # this is still required as argparse is having problem with IBus
    for o, a in opts:
        if o in ("-h", "--help"):
            print_help(0)
        elif o in ("-d", "--daemonize"):
            daemonize = True
        elif o in ("-i", "--ibus"):
            exec_by_ibus = True
        else:
            sys.stderr.write("Unknown argument: %s\n" % o)
            print_help(1)
    logger.info(f'daemonize? : {daemonize}')
    logger.info(f'IBus exec? : {exec_by_ibus}')

    if daemonize:
        if os.fork():
            sys.exit()
    IMApp(exec_by_ibus).run()


if __name__ == "__main__":
    try:
        locale.bindtextdomain(util.get_package_name(), util.get_localedir())
    except AttributeError:
        # locale.bindtextdomain is not available on every platform
        pass
    gettext.bindtextdomain(util.get_package_name(), util.get_localedir())
    main()
