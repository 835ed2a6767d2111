#!/usr/bin/env python3
import argparse
import os
import sys
from datetime import datetime

from standuplib import llm_client
from standuplib import standup_pipeline
from standuplib import standup_settings

try:
	import rich.console
except ModuleNotFoundError as error:
	raise RuntimeError(
		"Missing dependency: rich. Install with: pip install rich"
	) from error


RICH_CONSOLE = rich.console.Console(stderr=True)


#============================================
def log_step(message: str) -> None:
	"""
	Print one timestamped progress line to stderr.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	line = f"[claw-standup {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif ("skipping" in lower) or ("unreadable" in lower) or ("warning" in lower):
		style = "yellow"
	elif ("wrote " in lower) or ("found" in lower) or ("collected" in lower):
		style = "green"
	RICH_CONSOLE.print(line, style=style, markup=False, highlight=False)


#============================================
def positive_int(value: str) -> int:
	"""
	argparse type for integers >= 1.
	"""
	number = int(value)
	if number < 1:
		raise argparse.ArgumentTypeError(f"must be >= 1: {value}")
	return number


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		prog="claw-standup",
		description="Generate a standup report from local git repos and daily notes.",
	)
	parser.add_argument(
		"--days",
		type=positive_int,
		default=None,
		help="Number of days to look back (defaults from settings.yaml, else 1).",
	)
	parser.add_argument(
		"--path",
		default=None,
		help="Workspace directory to scan (defaults from settings.yaml, else .).",
	)
	parser.add_argument(
		"--author",
		default=None,
		help="Git author to filter by (default: git config user.name).",
	)
	parser.add_argument(
		"--ai",
		action="store_true",
		help="Prepend an AI narrative summary to the markdown report.",
	)
	parser.add_argument(
		"--json",
		dest="json_output",
		action="store_true",
		help="Output JSON instead of markdown.",
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for defaults.",
	)
	parser.add_argument(
		"--llm-transport",
		choices=list(llm_client.SUPPORTED_TRANSPORTS),
		default=None,
		help="Text-generation transport (defaults from settings.yaml, else gemini).",
	)
	parser.add_argument(
		"--llm-model",
		default=None,
		help="Optional model override (defaults from settings.yaml).",
	)
	parser.add_argument(
		"--output",
		default="",
		help="Write the report to this file instead of stdout.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def resolve_config(
	args: argparse.Namespace,
	settings: dict,
	author_fn=None,
) -> standup_pipeline.StandupConfig:
	"""
	Merge CLI flags over settings over defaults into one run config.

	git config user.name is consulted only when neither the flag nor the
	settings file names an author.
	"""
	days = args.days
	if days is None:
		days = standup_settings.get_setting_int(settings, ["report", "days"], 1)
	if days < 1:
		raise RuntimeError(f"report.days must be >= 1: {days}")

	workspace = args.path or standup_settings.get_setting_str(settings, ["workspace", "path"], ".")

	author = args.author
	if author is None:
		author = standup_settings.get_setting_str(settings, ["report", "author"], "")
	if not author:
		resolver = author_fn or standup_settings.resolve_default_author
		author = resolver()

	json_output = args.json_output
	if not json_output:
		format_name = standup_settings.get_setting_str(settings, ["report", "format"], "markdown")
		json_output = format_name.lower() == "json"

	return standup_pipeline.StandupConfig(
		workspace=os.path.abspath(workspace),
		days=days,
		author=author.strip(),
		json_output=json_output,
		use_ai=args.ai,
		notes_dir=standup_settings.get_setting_str(settings, ["report", "notes_dir"], "memory"),
		notes_extension=standup_settings.get_setting_str(settings, ["report", "notes_extension"], "md"),
		digest_lines=standup_settings.get_setting_int(settings, ["report", "digest_lines"], 10),
		llm_max_tokens=standup_settings.get_setting_int(settings, ["llm", "max_tokens"], 1200),
	)


#============================================
def build_llm_client(args: argparse.Namespace, settings: dict) -> llm_client.LLMClient:
	"""
	Create the text-generation client from flags and settings.
	"""
	transport_name = args.llm_transport or standup_settings.get_enabled_llm_transport(settings)
	model_name = args.llm_model
	if model_name is None:
		model_name = standup_settings.get_transport_model(settings, transport_name)
	log_step(f"Using LLM transport: {llm_client.describe_llm_execution_path(transport_name, model_name)}")
	return llm_client.create_llm_client(
		transport_name,
		model_override=model_name,
		gemini_command=standup_settings.get_gemini_command(settings),
		ollama_base_url=standup_settings.get_ollama_base_url(settings),
		log_fn=log_step,
	)


#============================================
def write_output(text: str, output_path: str) -> None:
	"""
	Write report text to a file, or to stdout when no path is given.
	"""
	if not output_path:
		sys.stdout.write(text)
		if not text.endswith("\n"):
			sys.stdout.write("\n")
		return
	output_dir = os.path.dirname(os.path.abspath(output_path))
	os.makedirs(output_dir, exist_ok=True)
	with open(output_path, "w", encoding="utf-8") as handle:
		handle.write(text)
		if not text.endswith("\n"):
			handle.write("\n")
	log_step(f"Wrote {output_path}")


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Run the standup report command.
	"""
	args = parse_args(argv)
	try:
		settings, settings_path = standup_settings.load_settings(args.settings)
		if settings:
			log_step(f"Using settings file: {settings_path}")
		config = resolve_config(args, settings)
	except RuntimeError as error:
		log_step(f"Configuration error: {error}")
		return 1

	# a broken LLM setup only costs the AI block, never the report
	client = None
	llm_setup_error = ""
	if config.use_ai and not config.json_output:
		try:
			client = build_llm_client(args, settings)
		except RuntimeError as error:
			llm_setup_error = f"LLM setup failed: {error}"
			log_step(llm_setup_error)

	if not config.json_output:
		log_step(
			f"Scanning {config.workspace} for activity by {config.author or 'anyone'} "
			+ f"over last {config.days} days..."
		)
	try:
		text = standup_pipeline.run_standup(
			config,
			llm_client=client,
			log_fn=log_step,
			llm_setup_error=llm_setup_error,
		)
	except RuntimeError as error:
		log_step(f"Report failed: {error}")
		return 1
	write_output(text, args.output)
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
