"""Tests for CLI commands."""

import pytest
import json
import yaml
from unittest.mock import patch
from argparse import Namespace

from conftest import build_workbook, write_locales
from i18n_excel.cli import (
    apply_export_overrides,
    apply_import_overrides,
    cmd_init,
    cmd_export,
    cmd_import,
    cmd_watch,
    load_and_validate_config,
    main,
)
from i18n_excel.core.constants import LABEL_ROW_MARKER, MISSING_PLACEHOLDER
from i18n_excel.core.sheet_reader import read_sheet
from i18n_excel.utils.config import CONFIG_FILE_NAME, Config, ConfigValidationError
from i18n_excel.utils.logging import reset_logger


def export_args(**overrides):
    values = dict(
        config=None, verbose=False, quiet=True, log_file=None,
        locales_dir=None, excel=None, key_column=None, locales=None, order=None,
        mode=None, no_highlight=False, backup=False, report=None, fail_on_missing=False,
    )
    values.update(overrides)
    return Namespace(**values)


def import_args(**overrides):
    values = dict(
        config=None, verbose=False, quiet=True, log_file=None,
        excel=None, output_dir=None, sheet=None, key_column=None, flat_keys=False,
        ignore_rows=None, map=None, strict=False,
    )
    values.update(overrides)
    return Namespace(**values)


@pytest.fixture(autouse=True)
def clean_logger():
    reset_logger()
    yield
    reset_logger()


class TestCmdInit:
    """Test cases for cmd_init command."""

    def test_init_creates_config_file(self, tmp_path, monkeypatch):
        """init writes a config seeded from existing locale files."""
        monkeypatch.chdir(tmp_path)
        write_locales(tmp_path / 'src' / 'locales', {'zh': {}, 'en': {}})

        result = cmd_init(Namespace(locales_dir='src/locales', force=False))

        assert result == 0
        config_data = yaml.safe_load((tmp_path / CONFIG_FILE_NAME).read_text(encoding='utf-8'))
        assert config_data['export']['locales_dir'] == 'src/locales'
        assert config_data['export']['locale_order'] == ['en', 'zh']
        assert config_data['import']['output_dir'] == 'src/locales'

    def test_init_fails_without_force_if_exists(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILE_NAME).write_text('existing: config')

        assert cmd_init(Namespace(locales_dir='src/locales', force=False)) == 1
        assert (tmp_path / CONFIG_FILE_NAME).read_text() == 'existing: config'

    def test_init_overwrites_with_force(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILE_NAME).write_text('old: config')

        assert cmd_init(Namespace(locales_dir='i18n', force=True)) == 0

        config_data = yaml.safe_load((tmp_path / CONFIG_FILE_NAME).read_text(encoding='utf-8'))
        assert 'old' not in config_data
        assert config_data['export']['locales_dir'] == 'i18n'


class TestLoadAndValidateConfig:
    """Test cases for load_and_validate_config."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_and_validate_config() == Config()

    def test_overrides_applied_before_validation(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        def apply(config):
            config.export_options.merge_mode = 'sideways'

        with pytest.raises(ConfigValidationError):
            load_and_validate_config(apply=apply)

        assert 'Configuration errors' in capsys.readouterr().out

    def test_explicit_config_path(self, tmp_path):
        config_path = tmp_path / 'custom.yml'
        config_path.write_text(yaml.safe_dump({'import': {'sheet': 'web'}}))

        config = load_and_validate_config(str(config_path))

        assert config.import_options.sheet == 'web'


class TestOverrides:
    """Test cases for command-line overrides."""

    def test_export_overrides(self):
        config = Config()
        apply_export_overrides(config, export_args(
            locales_dir='i18n', excel='out.xlsx', locales='zh, en', order='en',
            mode='overwrite', no_highlight=True, backup=True,
        ))

        opts = config.export_options
        assert opts.locales_dir == 'i18n'
        assert opts.excel_path == 'out.xlsx'
        assert opts.locales == ['zh', 'en']
        assert opts.locale_order == ['en']
        assert opts.merge_mode == 'overwrite'
        assert opts.highlight_missing is False
        assert opts.backup is True

    def test_import_overrides(self):
        config = Config()
        apply_import_overrides(config, import_args(
            sheet='2', ignore_rows=2, flat_keys=True, strict=True,
            map=['en_old=en', 'zh_tw = zh', 'broken'],
        ))

        opts = config.import_options
        assert opts.sheet == 2
        assert opts.ignore_rows == 2
        assert opts.nested_keys is False
        assert opts.on_conflict == 'strict'
        assert opts.locale_map == {'en_old': 'en', 'zh_tw': 'zh'}

    def test_sheet_name_override(self):
        config = Config()
        apply_import_overrides(config, import_args(sheet='web'))
        assert config.import_options.sheet == 'web'

    def test_no_overrides_keep_config(self):
        config = Config()
        config.import_options.locale_map = {'en_old': 'en'}
        apply_import_overrides(config, import_args())
        apply_export_overrides(config, export_args())
        assert config.import_options.locale_map == {'en_old': 'en'}
        assert config.export_options.merge_mode == 'merge'


class TestCmdExport:
    """Test cases for cmd_export command."""

    def test_export_writes_excel(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        write_locales(tmp_path / 'src' / 'locales', {'zh': {'a': {'b': '你好'}}, 'en': {'a': {'b': ''}}})

        result = cmd_export(export_args(locales='zh,en', mode='overwrite'))

        assert result == 0
        sheet = read_sheet((tmp_path / 'src' / 'locales' / 'translations.xlsx').read_bytes())
        assert sheet.rows == [{'key': 'a.b', 'zh': '你好', 'en': MISSING_PLACEHOLDER}]

    def test_export_fail_on_missing(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        write_locales(tmp_path / 'src' / 'locales', {'en': {'a': ''}})

        assert cmd_export(export_args(fail_on_missing=True)) == 1
        assert '1 translations missing' in capsys.readouterr().out

    def test_export_nothing_to_do(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / 'src' / 'locales').mkdir(parents=True)

        assert cmd_export(export_args()) == 1

    def test_export_invalid_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILE_NAME).write_text(yaml.safe_dump({'export': {'merge_mode': 'nope'}}))

        assert cmd_export(export_args()) == 1

    def test_export_report(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        write_locales(tmp_path / 'src' / 'locales', {'en': {'a': 'A', 'b': ''}})

        result = cmd_export(export_args(report='reports/export.json'))

        assert result == 0
        report = json.loads((tmp_path / 'reports' / 'export.json').read_text(encoding='utf-8'))
        assert report['summary']['total_keys'] == 2
        assert report['missing'] == {'en': ['b']}

    def test_export_prints_summary(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        write_locales(tmp_path / 'src' / 'locales', {'en': {'a': 'A'}})

        assert cmd_export(export_args(quiet=False)) == 0

        assert 'Export completed' in capsys.readouterr().out


class TestCmdImport:
    """Test cases for cmd_import command."""

    def test_import_writes_json(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        excel = tmp_path / 'book.xlsx'
        excel.write_bytes(build_workbook({'s': [
            ['key', 'en', 'en_old'],
            ['hello', None, 'Hello'],
            ['list.0', 'x', None],
        ]}))

        result = cmd_import(import_args(excel='book.xlsx', output_dir='out', map=['en_old=en']))

        assert result == 0
        data = json.loads((tmp_path / 'out' / 'en.json').read_text(encoding='utf-8'))
        assert data == {'hello': 'Hello', 'list': ['x']}
        assert not (tmp_path / 'out' / 'en_old.json').exists()

    def test_import_missing_excel(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        assert cmd_import(import_args(excel='missing.xlsx')) == 1
        assert 'Excel file not found' in capsys.readouterr().out

    @pytest.mark.parametrize('content', [b'not a workbook', b'PK\x03\x04 half saved'])
    def test_import_unreadable_workbook(self, tmp_path, monkeypatch, capsys, content):
        monkeypatch.chdir(tmp_path)
        (tmp_path / 'book.xlsx').write_bytes(content)

        assert cmd_import(import_args(excel='book.xlsx')) == 1
        assert 'Could not read workbook' in capsys.readouterr().out

    def test_import_missing_sheet(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / 'book.xlsx').write_bytes(build_workbook({'s': [['key', 'en'], ['a', 'A']]}))

        assert cmd_import(import_args(excel='book.xlsx', sheet='4')) == 1

    def test_import_prints_summary(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        (tmp_path / 'book.xlsx').write_bytes(build_workbook({'s': [['key', 'en'], ['a', 'A']]}))

        assert cmd_import(import_args(excel='book.xlsx', quiet=False)) == 0
        assert '1 locale files generated' in capsys.readouterr().out


class TestCmdWatch:
    """Test cases for cmd_watch command."""

    def test_watch_uses_configured_debounce(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        args = import_args(debounce=1.5)

        with patch('i18n_excel.cli.ExcelWatcher') as watcher_cls:
            assert cmd_watch(args) == 0

        _, kwargs = watcher_cls.call_args
        assert kwargs['debounce_seconds'] == 1.5
        watcher_cls.return_value.run_forever.assert_called_once()

    def test_watch_invalid_debounce(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch('i18n_excel.cli.ExcelWatcher') as watcher_cls:
            assert cmd_watch(import_args(debounce=-1.0)) == 1
        watcher_cls.assert_not_called()


class TestMain:
    """Test cases for the argument parser."""

    def test_no_command_prints_help(self, capsys):
        with patch('sys.argv', ['i18n-excel']):
            assert main() == 0
        assert 'usage: i18n-excel' in capsys.readouterr().out

    def test_version(self, capsys):
        with patch('sys.argv', ['i18n-excel', '--version']):
            with pytest.raises(SystemExit) as excinfo:
                main()
        assert excinfo.value.code == 0
        assert 'i18n-excel' in capsys.readouterr().out

    def test_dispatch_import(self):
        with patch('sys.argv', ['i18n-excel', 'import', '--sheet', '1', '--map', 'en_old=en', '--strict']):
            with patch('i18n_excel.cli.cmd_import', return_value=0) as cmd:
                assert main() == 0

        args = cmd.call_args[0][0]
        assert args.sheet == '1'
        assert args.map == ['en_old=en']
        assert args.strict is True

    def test_dispatch_export(self):
        with patch('sys.argv', ['i18n-excel', 'export', '--mode', 'overwrite', '-q']):
            with patch('i18n_excel.cli.cmd_export', return_value=0) as cmd:
                assert main() == 0

        args = cmd.call_args[0][0]
        assert args.mode == 'overwrite'
        assert args.quiet is True

    def test_invalid_mode_rejected(self):
        with patch('sys.argv', ['i18n-excel', 'export', '--mode', 'append']):
            with pytest.raises(SystemExit):
                main()


class TestRoundTrip:
    """init, export and import chained the way a project uses them."""

    def test_init_export_import_keeps_label_row_out_of_json(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        locales_dir = write_locales(tmp_path / 'src' / 'locales', {
            'en': {'a': 'Hello', 'menu': ['Home']},
            'zh': {'a': '你好', 'menu': ['首页']},
        })

        assert cmd_init(Namespace(locales_dir='src/locales', force=False)) == 0
        assert cmd_export(export_args()) == 0
        rows = read_sheet((locales_dir / 'translations.xlsx').read_bytes()).rows
        assert rows[0]['key'] == LABEL_ROW_MARKER

        assert cmd_import(import_args()) == 0

        en = json.loads((locales_dir / 'en.json').read_text(encoding='utf-8'))
        zh = json.loads((locales_dir / 'zh.json').read_text(encoding='utf-8'))
        assert en == {'a': 'Hello', 'menu': ['Home']}
        assert zh == {'a': '你好', 'menu': ['首页']}
        assert not (locales_dir / f'{LABEL_ROW_MARKER}.json').exists()
