"""
Gemini command-line transport.
"""

from __future__ import annotations

# Standard Library
import subprocess

# local repo modules
from standuplib.llm_errors import LLMCallError, TransportUnavailableError


class GeminiCliTransport:
	name = "GeminiCLI"

	def __init__(
		self,
		command: str = "gemini",
		model: str = "",
		run_fn=None,
	) -> None:
		self.command = command
		self.model = model
		self.run_fn = run_fn or subprocess.run

	def _build_args(self, prompt: str) -> list[str]:
		args = [self.command]
		if self.model:
			args.extend(["--model", self.model])
		args.append(prompt)
		return args

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		# the CLI has no token cap flag; max_tokens is accepted for interface parity
		try:
			result = self.run_fn(
				self._build_args(prompt),
				capture_output=True,
				text=True,
				errors="replace",
				check=False,
			)
		except OSError as exc:
			raise TransportUnavailableError(
				f"Could not execute '{self.command}' command."
			) from exc
		stdout_text = (result.stdout or "").strip()
		stderr_text = (result.stderr or "").strip()
		if stderr_text and not stdout_text:
			raise LLMCallError(stderr_text)
		if not stdout_text:
			raise LLMCallError(f"'{self.command}' returned no output for {purpose}.")
		return stdout_text
