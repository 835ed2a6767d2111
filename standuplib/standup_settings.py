"""Defaults for claw-standup read from an optional settings.yaml.

The file only supplies defaults; command-line flags always win. Recognized
keys are workspace.path, report.*, llm.max_tokens, llm.transport and the
gemini/ollama blocks under llm.providers.
"""

import os
import subprocess

import yaml


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LLM_PROVIDERS = ("gemini", "ollama")
DEFAULT_LLM_TRANSPORT = "gemini"
DEFAULT_GEMINI_COMMAND = "gemini"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
TRUE_WORDS = {"1", "true", "yes", "on"}
FALSE_WORDS = {"0", "false", "no", "off"}


#============================================
def resolve_settings_path(path_text: str) -> str:
	"""
	Resolve a relative settings path against cwd, then the project directory.
	"""
	if os.path.isabs(path_text):
		return path_text
	candidates = [
		os.path.abspath(path_text),
		os.path.abspath(os.path.join(PROJECT_ROOT, path_text)),
	]
	for candidate in candidates:
		if os.path.isfile(candidate):
			return candidate
	return candidates[-1]


#============================================
def load_settings(path_text: str) -> tuple[dict, str]:
	"""
	Load the settings mapping; a missing or empty file gives {}.
	"""
	resolved_path = resolve_settings_path(path_text)
	if not os.path.isfile(resolved_path):
		return {}, resolved_path
	with open(resolved_path, "r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle)
	if data is None:
		return {}, resolved_path
	if not isinstance(data, dict):
		raise RuntimeError(f"Settings file must contain a mapping: {resolved_path}")
	return data, resolved_path


#============================================
def _key_text(keys: list[str]) -> str:
	return ".".join(keys)


#============================================
def get_nested_value(settings: dict, keys: list[str], default_value):
	"""
	Walk a key path; missing keys and null values give the default.
	"""
	current = settings
	for key in keys:
		if not isinstance(current, dict) or key not in current:
			return default_value
		current = current[key]
	if current is None:
		return default_value
	return current


#============================================
def get_setting_str(settings: dict, keys: list[str], default_value: str) -> str:
	value = get_nested_value(settings, keys, default_value)
	return str(value).strip()


#============================================
def get_setting_int(settings: dict, keys: list[str], default_value: int) -> int:
	"""
	Read an integer; anything int() rejects is a RuntimeError.
	"""
	value = get_nested_value(settings, keys, default_value)
	try:
		return int(value)
	except (TypeError, ValueError) as error:
		raise RuntimeError(f"Invalid integer for setting path {_key_text(keys)}: {value}") from error


#============================================
def get_setting_bool(settings: dict, keys: list[str], default_value: bool) -> bool:
	"""
	Read a boolean from a YAML bool, an integer or a yes/no style word.
	"""
	value = get_nested_value(settings, keys, default_value)
	if isinstance(value, bool):
		return value
	if isinstance(value, int):
		return value != 0
	text = str(value).strip().lower()
	if text in TRUE_WORDS:
		return True
	if text in FALSE_WORDS:
		return False
	raise RuntimeError(f"Invalid boolean for setting path {_key_text(keys)}: {value}")


#============================================
def get_provider_block(settings: dict, provider_name: str) -> dict:
	"""
	Return llm.providers.<provider_name>, or {} when it is not configured.
	"""
	providers = get_nested_value(settings, ["llm", "providers"], {})
	if not isinstance(providers, dict):
		raise RuntimeError("Invalid settings: llm.providers must be a mapping.")
	block = providers.get(provider_name) or {}
	if not isinstance(block, dict):
		raise RuntimeError(f"Invalid settings: llm.providers.{provider_name} must be a mapping.")
	return block


#============================================
def get_enabled_llm_transport(settings: dict) -> str:
	"""
	Pick the transport from the enabled provider block.

	At most one of gemini/ollama may be enabled. With neither enabled the
	legacy llm.transport value is used, then the gemini default.
	"""
	enabled = []
	for provider_name in LLM_PROVIDERS:
		block = get_provider_block(settings, provider_name)
		if get_setting_bool(block, ["enabled"], False):
			enabled.append(provider_name)
	if len(enabled) > 1:
		raise RuntimeError(
			"Only one LLM provider may be enabled in settings.yaml. "
			+ f"Enabled providers: {', '.join(enabled)}"
		)
	if enabled:
		return enabled[0]
	return get_setting_str(settings, ["llm", "transport"], "") or DEFAULT_LLM_TRANSPORT


#============================================
def get_gemini_command(settings: dict) -> str:
	block = get_provider_block(settings, "gemini")
	return get_setting_str(block, ["command"], DEFAULT_GEMINI_COMMAND) or DEFAULT_GEMINI_COMMAND


#============================================
def get_ollama_base_url(settings: dict) -> str:
	block = get_provider_block(settings, "ollama")
	return get_setting_str(block, ["base_url"], DEFAULT_OLLAMA_BASE_URL) or DEFAULT_OLLAMA_BASE_URL


#============================================
def get_ollama_model(settings: dict) -> str:
	"""
	Return the single enabled entry of llm.providers.ollama.models.

	No enabled entry gives "" and leaves the decision to the transport
	factory; more than one is a RuntimeError.
	"""
	entries = get_provider_block(settings, "ollama").get("models") or []
	if not isinstance(entries, list):
		raise RuntimeError("Invalid settings: llm.providers.ollama.models must be a list.")
	enabled = []
	for entry in entries:
		if not isinstance(entry, dict):
			continue
		name = get_setting_str(entry, ["name"], "")
		if name and get_setting_bool(entry, ["enabled"], False):
			enabled.append(name)
	if len(enabled) > 1:
		raise RuntimeError(
			"Only one Ollama model may be enabled in settings.yaml. "
			+ f"Enabled models: {', '.join(enabled)}"
		)
	if enabled:
		return enabled[0]
	return ""


#============================================
def get_transport_model(settings: dict, transport_name: str) -> str:
	"""
	Settings model for a transport; only the Ollama leg reads one.
	"""
	if transport_name in ("ollama", "auto"):
		return get_ollama_model(settings)
	return ""


#============================================
def resolve_default_author(run_fn=None) -> str:
	"""
	Read git config user.name, or return empty string when unavailable.
	"""
	runner = run_fn or subprocess.run
	try:
		result = runner(
			["git", "config", "user.name"],
			capture_output=True,
			text=True,
			check=False,
		)
	except OSError:
		return ""
	if result.returncode != 0:
		return ""
	return (result.stdout or "").strip()
