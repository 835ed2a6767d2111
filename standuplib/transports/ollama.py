"""
Ollama chat transport.
"""

from __future__ import annotations

# PIP3 modules
import requests

# local repo modules
from standuplib.llm_errors import LLMCallError, TransportUnavailableError


class OllamaTransport:
	name = "Ollama"

	def __init__(
		self,
		model: str,
		base_url: str = "http://localhost:11434",
		system_message: str = "",
		timeout_seconds: int = 120,
		session=None,
	) -> None:
		self.model = model
		self.base_url = base_url.rstrip("/")
		self.system_message = system_message
		self.timeout_seconds = int(timeout_seconds)
		self.session = session or requests.Session()

	def _build_messages(self, prompt: str) -> list[dict[str, str]]:
		messages: list[dict[str, str]] = []
		if self.system_message:
			messages.append({"role": "system", "content": self.system_message})
		messages.append({"role": "user", "content": prompt})
		return messages

	def _chat_endpoint(self) -> str:
		"""
		Build and validate the Ollama chat endpoint URL.
		"""
		if not self.base_url.startswith(("http://", "https://")):
			raise TransportUnavailableError("Ollama base_url must use http or https.")
		return self.base_url + "/api/chat"

	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		payload: dict[str, object] = {
			"model": self.model,
			"messages": self._build_messages(prompt),
			"stream": False,
			"options": {"num_predict": max_tokens},
		}
		try:
			response = self.session.post(
				self._chat_endpoint(),
				json=payload,
				timeout=self.timeout_seconds,
			)
		except requests.ConnectionError as exc:
			raise TransportUnavailableError("Ollama is unreachable.") from exc
		except requests.Timeout as exc:
			raise TransportUnavailableError(f"Ollama timed out during {purpose}.") from exc
		except requests.RequestException as exc:
			raise TransportUnavailableError(f"Ollama request failed: {exc}") from exc
		if response.status_code >= 400:
			raise LLMCallError(f"Ollama chat error: status {response.status_code}")
		try:
			parsed = response.json()
		except ValueError as exc:
			raise LLMCallError("Ollama chat returned a non-JSON body") from exc
		if not isinstance(parsed, dict):
			raise LLMCallError("Ollama chat returned an unexpected payload")
		message = parsed.get("message")
		assistant_message = ""
		if isinstance(message, dict):
			assistant_message = message.get("content") or ""
		if not isinstance(assistant_message, str) or not assistant_message.strip():
			raise LLMCallError("Ollama chat returned empty content")
		return assistant_message.strip()
