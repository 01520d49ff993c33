#!/usr/bin/env python3
"""
Command line interface for managing Finder shortcuts.
"""

# Standard Library
import argparse
import logging
from pathlib import Path
import sys
import uuid

# local repo modules
from .bundles import read_app_bundle
from .config import AppConfig, apply_user_config, load_user_config
from .errors import ExecutionError, StorageError
from .menu import build_menu
from .models import (
	DEFAULT_SYSTEM_ICONS,
	ApplicationLaunch,
	ApplicationScope,
	FileTypeFilter,
	MenuConfiguration,
	MenuItem,
	ShellCommand,
	SystemIcon,
	find_system_icon,
	parse_extension_list,
)
from .runner import build_invocation, run_invocation
from .store import ConfigurationStore
from .validation import validate_menu_item
from .variables import MenuVariable, validate

#============================================


def _add_item_options(parser: argparse.ArgumentParser) -> None:
	"""
	Options shared by add and edit commands.
	"""
	parser.add_argument(
		"--description",
		dest="description",
		help="Optional notes for the shortcut.",
	)
	parser.add_argument(
		"--symbol",
		dest="symbol",
		help="System icon symbol name (see `icons`).",
	)
	parser.add_argument(
		"--icon-image",
		dest="icon_image",
		help="Image file to copy in as a custom icon.",
	)
	parser.add_argument(
		"-e",
		"--ext",
		dest="extensions",
		action="append",
		help="Only show for files with these extensions (repeatable, comma lists allowed).",
	)
	parser.add_argument(
		"--no-folders",
		dest="no_folders",
		action="store_true",
		help="Do not show on folders.",
	)
	parser.add_argument(
		"--no-files",
		dest="no_files",
		action="store_true",
		help="Do not show on files.",
	)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Manage custom Finder context-menu shortcuts."
	)
	parser.add_argument(
		"-C",
		"--container",
		dest="container_dir",
		help="Shared container directory (default: app group container).",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_path",
		help="Optional JSON or YAML config file.",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	sub = parser.add_subparsers(dest="command", required=True)

	sub.add_parser("paths", help="Show storage locations.")

	list_parser = sub.add_parser("list", help="List shortcuts in display order.")
	list_parser.add_argument(
		"--enabled",
		dest="enabled_only",
		action="store_true",
		help="Only list enabled shortcuts.",
	)

	shell_parser = sub.add_parser("add-shell", help="Add a shell command shortcut.")
	shell_parser.add_argument("name", help="Menu title.")
	shell_parser.add_argument("shell_command", help="Command, may use %%{selectedPath} and friends.")
	shell_parser.add_argument("--cwd", dest="working_directory", help="Working directory.")
	shell_parser.add_argument(
		"--background",
		dest="background",
		action="store_true",
		help="Do not wait for the command.",
	)
	shell_parser.add_argument(
		"-t",
		"--timeout",
		dest="timeout",
		type=float,
		default=30.0,
		help="Timeout in seconds.",
	)
	_add_item_options(shell_parser)

	app_parser = sub.add_parser("add-app", help="Add an application launch shortcut.")
	app_parser.add_argument("app_path", help="Path to the .app bundle.")
	app_parser.add_argument("--name", dest="name", help="Menu title (default: app name).")
	app_parser.add_argument("--params", dest="params", default="", help="Extra arguments.")
	app_parser.add_argument(
		"--no-open-file",
		dest="no_open_file",
		action="store_true",
		help="Do not hand the selection to the application.",
	)
	app_parser.add_argument(
		"--no-activate",
		dest="no_activate",
		action="store_true",
		help="Launch without bringing the application forward.",
	)
	_add_item_options(app_parser)

	edit_parser = sub.add_parser("edit", help="Change an existing shortcut.")
	edit_parser.add_argument("item", help="Shortcut id or unique id prefix.")
	edit_parser.add_argument("--name", dest="name", help="New menu title.")
	edit_parser.add_argument("--command", dest="shell_command", help="New shell command.")
	edit_parser.add_argument("--params", dest="params", help="New application parameters.")
	edit_parser.add_argument(
		"--all-files",
		dest="all_files",
		action="store_true",
		help="Drop the extension filter.",
	)
	_add_item_options(edit_parser)

	remove_parser = sub.add_parser("remove", help="Remove a shortcut.")
	remove_parser.add_argument("item", help="Shortcut id or unique id prefix.")

	remove_all_parser = sub.add_parser("remove-all", help="Remove every shortcut.")
	remove_all_parser.add_argument("--yes", dest="yes", action="store_true", help="Confirm.")

	toggle_parser = sub.add_parser("toggle", help="Enable or disable a shortcut.")
	toggle_parser.add_argument("item", help="Shortcut id or unique id prefix.")

	move_parser = sub.add_parser("move", help="Move a shortcut to a position.")
	move_parser.add_argument("item", help="Shortcut id or unique id prefix.")
	move_parser.add_argument("index", type=int, help="Zero-based display position.")

	menu_parser = sub.add_parser("menu", help="Show the menu Finder would build.")
	menu_parser.add_argument("paths", nargs="+", help="Selected files or folders.")

	run_parser = sub.add_parser("run", help="Run a shortcut against a path.")
	run_parser.add_argument("item", help="Shortcut id or unique id prefix.")
	run_parser.add_argument("path", help="Selected file or folder.")
	mode_group = run_parser.add_mutually_exclusive_group()
	mode_group.add_argument(
		"-a",
		"--apply",
		dest="apply",
		action="store_true",
		help="Really run the command.",
	)
	mode_group.add_argument(
		"-d",
		"--dry-run",
		dest="dry_run",
		action="store_true",
		help="Only print the command (default).",
	)

	check_parser = sub.add_parser("check", help="Check a template for unknown variables.")
	check_parser.add_argument("template", help="Command or parameter text.")

	sub.add_parser("variables", help="List supported variables.")
	sub.add_parser("icons", help="List built-in system icons.")
	sub.add_parser("sweep-icons", help="Delete custom icon files no shortcut uses.")
	return parser.parse_args(argv)


#============================================


def build_config(args: argparse.Namespace) -> AppConfig:
	"""
	Build runtime config from args and file.
	"""
	config = AppConfig()
	if args.container_dir:
		config.container_dir = Path(args.container_dir).expanduser()
	if args.config_path:
		config.config_path = Path(args.config_path).expanduser()
		apply_user_config(config, load_user_config(config.config_path))
	config.verbose = config.verbose or args.verbose
	return config


#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


#============================================


def resolve_item(configuration: MenuConfiguration, ident: str) -> MenuItem:
	"""
	Find a shortcut by full id or unique id prefix.

	Raises:
		LookupError: If nothing or more than one item matches.
	"""
	if not ident.strip():
		raise LookupError("Shortcut id must not be blank")
	try:
		item = configuration.find(uuid.UUID(ident))
		if item is not None:
			return item
	except ValueError:
		pass
	prefix = ident.lower()
	matches = [item for item in configuration.menu_items if str(item.id).startswith(prefix)]
	if len(matches) == 1:
		return matches[0]
	if not matches:
		raise LookupError(f"No shortcut matches {ident!r}")
	raise LookupError(f"{ident!r} matches {len(matches)} shortcuts; use a longer prefix")


#============================================


def _scope_from_args(args: argparse.Namespace, base: ApplicationScope | None = None) -> ApplicationScope:
	base = base or ApplicationScope()
	show_on_folders = base.show_on_folders and not args.no_folders
	show_on_files = base.show_on_files and not args.no_files
	file_type_filter = base.file_type_filter
	extensions = base.allowed_extensions
	if args.extensions:
		extensions = parse_extension_list(",".join(args.extensions))
		file_type_filter = FileTypeFilter.SPECIFIC_EXTENSIONS
	if getattr(args, "all_files", False):
		extensions = ()
		file_type_filter = FileTypeFilter.ALL_FILES
	return ApplicationScope(
		show_on_folders=show_on_folders,
		show_on_files=show_on_files,
		file_type_filter=file_type_filter,
		allowed_extensions=extensions,
	)


def _symbol_icon(symbol: str) -> SystemIcon:
	return find_system_icon(symbol) or SystemIcon(symbol_name=symbol, display_name=symbol)


def _next_sort_order(configuration: MenuConfiguration) -> int:
	if not configuration.menu_items:
		return 0
	return max(item.sort_order for item in configuration.menu_items) + 1


def _describe(item: MenuItem) -> str:
	state = _color("[ON ]", "32") if item.is_enabled else _color("[OFF]", "90")
	scope = item.scope
	if scope.file_type_filter is FileTypeFilter.SPECIFIC_EXTENSIONS:
		files = ",".join(scope.allowed_extensions) or "-"
	else:
		files = "all" if scope.show_on_files else "-"
	folders = "yes" if scope.show_on_folders else "no"
	return (
		f"{state} {str(item.id)[:8]} {item.name} "
		f"({item.execution.display_name}: {item.command_text().strip()}) "
		f"[files={files} folders={folders} order={item.sort_order}]"
	)


def _report_invalid(item: MenuItem) -> bool:
	result = validate_menu_item(item)
	if not result.is_valid:
		print(f"{_color('[INVALID]', '31')} {result.message}")
	return result.is_valid


#============================================


def _cmd_paths(store: ConfigurationStore, args: argparse.Namespace) -> int:
	path = store.config_path
	icons = store.icons
	print(f"{_color('[PATH]', '34')} Container: {store.container_dir}")
	print(f"{_color('[PATH]', '34')} Config file: {path} (exists: {path.exists()})")
	print(f"{_color('[PATH]', '34')} Icons: {icons.icons_dir} ({len(icons.stored_files())} files)")
	return 0


def _cmd_list(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	items = configuration.enabled_items() if args.enabled_only else configuration.sorted_items()
	if not items:
		print(f"{_color('[INFO]', '34')} No shortcuts configured.")
		return 0
	for item in items:
		print(_describe(item))
	return 0


def _cmd_add_shell(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	item = MenuItem(
		name=args.name.strip(),
		icon=_symbol_icon(args.symbol or "terminal"),
		execution=ShellCommand(
			command=args.shell_command,
			working_directory=args.working_directory,
			run_in_background=args.background,
			timeout_seconds=args.timeout,
		),
		scope=_scope_from_args(args),
		sort_order=_next_sort_order(configuration),
		description=args.description,
	)
	if not _report_invalid(item):
		return 1
	icon_source = Path(args.icon_image).expanduser() if args.icon_image else None
	saved = store.add_item(item, icon_source=icon_source)
	print(f"{_color('[ADDED]', '32')} {_describe(saved.find(item.id))}")
	return 0


def _cmd_add_app(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	bundle = read_app_bundle(args.app_path)
	icon = _symbol_icon(args.symbol) if args.symbol else bundle.application_icon()
	item = MenuItem(
		name=(args.name or bundle.app_name).strip(),
		icon=icon,
		execution=bundle.application_launch(
			custom_parameters=args.params,
			open_with_file=not args.no_open_file,
			activate_app=not args.no_activate,
		),
		scope=_scope_from_args(args),
		sort_order=_next_sort_order(configuration),
		description=args.description,
	)
	if not _report_invalid(item):
		return 1
	icon_source = Path(args.icon_image).expanduser() if args.icon_image else None
	saved = store.add_item(item, icon_source=icon_source)
	print(f"{_color('[ADDED]', '32')} {_describe(saved.find(item.id))}")
	return 0


def _cmd_edit(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	existing = resolve_item(configuration, args.item)
	changes: dict = {"scope": _scope_from_args(args, existing.scope)}
	if args.name is not None:
		changes["name"] = args.name.strip()
	if args.description is not None:
		changes["description"] = args.description
	if args.symbol:
		changes["icon"] = _symbol_icon(args.symbol)
	match existing.execution:
		case ShellCommand() as shell:
			if args.params is not None:
				print(f"{_color('[INVALID]', '31')} --params only applies to application shortcuts.")
				return 1
			if args.shell_command is not None:
				changes["execution"] = ShellCommand(
					command=args.shell_command,
					working_directory=shell.working_directory,
					run_in_background=shell.run_in_background,
					timeout_seconds=shell.timeout_seconds,
				)
		case ApplicationLaunch() as launch:
			if args.shell_command is not None:
				print(f"{_color('[INVALID]', '31')} --command only applies to shell shortcuts.")
				return 1
			if args.params is not None:
				changes["execution"] = ApplicationLaunch(
					app_path=launch.app_path,
					app_name=launch.app_name,
					custom_parameters=args.params,
					open_with_file=launch.open_with_file,
					activate_app=launch.activate_app,
					bundle_identifier=launch.bundle_identifier,
				)
	item = existing.updating(**changes)
	if not _report_invalid(item):
		return 1
	icon_source = Path(args.icon_image).expanduser() if args.icon_image else None
	saved = store.update_item(item, icon_source=icon_source)
	print(f"{_color('[UPDATED]', '32')} {_describe(saved.find(item.id))}")
	return 0


def _cmd_remove(store: ConfigurationStore, args: argparse.Namespace) -> int:
	item = resolve_item(store.load(), args.item)
	store.remove_item(item.id)
	print(f"{_color('[REMOVED]', '33')} {item.name}")
	return 0


def _cmd_remove_all(store: ConfigurationStore, args: argparse.Namespace) -> int:
	if not args.yes:
		print(f"{_color('[ABORT]', '33')} Pass --yes to remove every shortcut.")
		return 1
	count = len(store.load().menu_items)
	store.remove_all()
	print(f"{_color('[REMOVED]', '33')} {count} shortcuts")
	return 0


def _cmd_toggle(store: ConfigurationStore, args: argparse.Namespace) -> int:
	item = resolve_item(store.load(), args.item)
	saved = store.toggle_item(item.id)
	print(_describe(saved.find(item.id)))
	return 0


def _cmd_move(store: ConfigurationStore, args: argparse.Namespace) -> int:
	item = resolve_item(store.load(), args.item)
	saved = store.move_item(item.id, args.index)
	for entry in saved.sorted_items():
		print(_describe(entry))
	return 0


def _cmd_menu(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	selection = [Path(p).expanduser() for p in args.paths]
	entries = build_menu(configuration, selection)
	if not entries:
		print(f"{_color('[MENU]', '36')} No shortcuts apply to this selection.")
		return 0
	for entry in entries:
		icon = entry.icon.display_name if configuration.settings.show_icons else ""
		print(f"{_color('[MENU]', '36')} {entry.name} {_color(icon, '90') if icon else ''}".rstrip())
	return 0


def _cmd_run(store: ConfigurationStore, args: argparse.Namespace) -> int:
	configuration = store.load()
	item = resolve_item(configuration, args.item)
	selected = Path(args.path).expanduser()
	invocation = build_invocation(item, selected, configuration.settings.default_timeout_seconds)
	if not args.apply:
		print(f"{_color('[DRY RUN]', '33')} {invocation.display()}")
		if invocation.cwd:
			print(f"{_color('[DRY RUN]', '33')} cwd={invocation.cwd}")
		return 0
	result = run_invocation(invocation)
	if result is None:
		print(f"{_color('[STARTED]', '32')} {invocation.display()}")
		return 0
	if result.stdout:
		print(result.stdout, end="")
	if result.stderr:
		print(result.stderr, end="", file=sys.stderr)
	return result.returncode


def _cmd_check(store: ConfigurationStore, args: argparse.Namespace) -> int:
	result = validate(args.template)
	if result.is_valid:
		print(f"{_color('[OK]', '32')} All variables are supported.")
		return 0
	print(f"{_color('[INVALID]', '31')} {result.error_message}")
	return 1


def _cmd_variables(store: ConfigurationStore, args: argparse.Namespace) -> int:
	for variable in MenuVariable:
		print(f"{variable.token:<26} {variable.description} (e.g. {variable.example_value})")
	return 0


def _cmd_icons(store: ConfigurationStore, args: argparse.Namespace) -> int:
	for icon in DEFAULT_SYSTEM_ICONS:
		print(f"{icon.category.display_name:<12} {icon.symbol_name:<18} {icon.display_name}")
	return 0


def _cmd_sweep_icons(store: ConfigurationStore, args: argparse.Namespace) -> int:
	removed = store.sweep_icons()
	for name in removed:
		print(f"{_color('[SWEPT]', '33')} {name}")
	print(f"{_color('[INFO]', '34')} Removed {len(removed)} orphaned icon files.")
	return 0


COMMANDS = {
	"paths": _cmd_paths,
	"list": _cmd_list,
	"add-shell": _cmd_add_shell,
	"add-app": _cmd_add_app,
	"edit": _cmd_edit,
	"remove": _cmd_remove,
	"remove-all": _cmd_remove_all,
	"toggle": _cmd_toggle,
	"move": _cmd_move,
	"menu": _cmd_menu,
	"run": _cmd_run,
	"check": _cmd_check,
	"variables": _cmd_variables,
	"icons": _cmd_icons,
	"sweep-icons": _cmd_sweep_icons,
}

READ_ONLY_COMMANDS = {"paths", "list", "menu", "run", "check", "variables", "icons"}


#============================================


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI.
	"""
	args = parse_args(argv)
	config = build_config(args)
	if config.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	store = config.build_store(read_only=args.command in READ_ONLY_COMMANDS)
	handler = COMMANDS[args.command]
	try:
		return handler(store, args)
	except (StorageError, LookupError, ExecutionError) as exc:
		print(f"{_color('[ERROR]', '31')} {exc}", file=sys.stderr)
		return 1


#============================================


if __name__ == "__main__":
	sys.exit(main())
