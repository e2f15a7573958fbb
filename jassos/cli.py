#!/usr/bin/env python3
"""
Command line interface for jassos.
"""

# Standard Library
import argparse
import getpass
import logging
import sys
from pathlib import Path

# local repo modules
from .config import ConfigResolver
from .errors import JassosError, UnknownProvider
from .generator import CodeGenerator
from .providers import PROVIDERS, available_providers, create_provider
from .shell import HISTORY_FILENAME, ChatSession, load_history

VERSION = "0.1.0"

#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


#============================================


def _print_llm(label: str) -> None:
	print(f"{_color('[LLM]', '36')} {label}")


#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		prog="jassos",
		description="Terminal-based AI development assistant.",
	)
	parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	subparsers = parser.add_subparsers(dest="command", required=True)

	init_parser = subparsers.add_parser(
		"init", help="Initialize jassos and configure an LLM provider."
	)
	init_parser.add_argument(
		"-p",
		"--provider",
		dest="provider",
		help=f"Provider to configure ({', '.join(available_providers())}).",
	)
	init_parser.add_argument(
		"--base-url",
		dest="base_url",
		help="Endpoint override, such as a remote Ollama server.",
	)

	change_parser = subparsers.add_parser("change", help="Switch the active LLM provider.")
	change_parser.add_argument("provider", help="Provider id to activate.")

	run_parser = subparsers.add_parser("run", help="Generate code or a project from a prompt.")
	run_parser.add_argument("prompt", help="What to generate.")
	run_parser.add_argument(
		"-m",
		"--model",
		dest="model",
		help="Override the configured model.",
	)
	run_parser.add_argument(
		"-d",
		"--directory",
		dest="directory",
		help="Base directory for generated files (default: current directory).",
	)
	run_parser.add_argument(
		"--dry-run",
		dest="dry_run",
		action="store_true",
		help="Only print the files that would be written.",
	)

	start_parser = subparsers.add_parser("start", help="Start the interactive AI shell.")
	start_parser.add_argument(
		"-c",
		"--continue",
		dest="resume",
		action="store_true",
		help="Continue the previous session.",
	)
	return parser.parse_args(argv)


#============================================


def _ask_provider() -> str:
	choices = available_providers()
	print("Select LLM provider:")
	for index, name in enumerate(choices, start=1):
		print(f"  {index}) {name}")
	answer = input("> ").strip()
	if answer.isdigit() and 1 <= int(answer) <= len(choices):
		return choices[int(answer) - 1]
	return answer


#============================================


def cmd_init(args: argparse.Namespace, resolver: ConfigResolver) -> None:
	resolver.init()
	provider = args.provider or _ask_provider()
	if provider not in PROVIDERS:
		raise UnknownProvider(provider)
	base_url = args.base_url
	if PROVIDERS[provider].requires_api_key:
		api_key = getpass.getpass(f"Enter {provider} API key: ").strip()
	else:
		# keyless backends get a base URL prompt instead
		api_key = ""
		if base_url is None:
			base_url = input(f"Enter {provider} base URL (blank for default): ").strip()
	resolver.set_credential(provider, api_key, base_url=base_url or None)
	resolver.set_active(provider)
	print(f"{_color('✓', '32')} Configured {provider} as active provider")


#============================================


def cmd_change(args: argparse.Namespace, resolver: ConfigResolver) -> None:
	resolver.set_active(args.provider)
	print(f"{_color('✓', '32')} Switched to {args.provider}")


#============================================


def cmd_run(args: argparse.Namespace, resolver: ConfigResolver) -> None:
	provider = create_provider(resolver, model=args.model)
	generator = CodeGenerator(provider)
	_print_llm(f"asking {provider.name} ({provider.model}) for code generation")
	directory = Path(args.directory).expanduser() if args.directory else None
	result = generator.generate(args.prompt, directory=directory, dry_run=args.dry_run)
	label = "Planned" if result.dry_run else "Created"
	for path in result.files:
		print(f"{_color('[FILE]', '34')} {label}: {path}")
	if result.degraded:
		print("\nResponse:\n", result.text)
	print(f"{_color('✓', '32')} Code generation complete!")


#============================================


def cmd_start(args: argparse.Namespace, resolver: ConfigResolver) -> None:
	provider = create_provider(resolver)
	config = resolver.get_effective()
	history_path = resolver.config_dir / HISTORY_FILENAME if config.history else None
	messages = []
	if args.resume and history_path is not None:
		messages = load_history(history_path)
		print(_color(f"Continuing session with {len(messages)} messages.", "90"))
	session = ChatSession(provider, history_path=history_path, messages=messages)
	session.run()


COMMANDS = {
	"init": cmd_init,
	"change": cmd_change,
	"run": cmd_run,
	"start": cmd_start,
}

#============================================


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI; the only place exit codes are decided.
	"""
	args = parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	resolver = ConfigResolver()
	try:
		COMMANDS[args.command](args, resolver)
	except JassosError as exc:
		print(f"{_color('✗', '31')} {exc}", file=sys.stderr)
		return 1
	except KeyboardInterrupt:
		print("", file=sys.stderr)
		return 130
	return 0


#============================================


if __name__ == "__main__":
	sys.exit(main())
