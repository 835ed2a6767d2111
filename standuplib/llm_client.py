from standuplib.llm_errors import LLMError
from standuplib.transports.gemini_cli import GeminiCliTransport
from standuplib.transports.ollama import OllamaTransport


SUPPORTED_TRANSPORTS = ("gemini", "ollama", "auto")


#============================================
class LLMClient:
	"""
	Try transports in order and return the first generated text.
	"""

	def __init__(self, transports: list, log_fn=None):
		if not transports:
			raise RuntimeError("LLMClient needs at least one transport")
		self.transports = list(transports)
		self.log_fn = log_fn

	#============================================
	def log(self, message: str) -> None:
		"""
		Emit one log line when logger is configured.
		"""
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def generate(self, prompt: str, *, purpose: str, max_tokens: int) -> str:
		"""
		Generate text, falling through to the next transport on failure.
		"""
		last_error: LLMError | None = None
		for transport in self.transports:
			try:
				return transport.generate(prompt, purpose=purpose, max_tokens=max_tokens)
			except LLMError as error:
				self.log(f"{transport.name} failed for {purpose}: {error}")
				last_error = error
		raise last_error


#============================================
def describe_llm_execution_path(transport_name: str, model_override: str) -> str:
	"""
	Describe configured LLM transport execution order.
	"""
	model_label = model_override or "auto"
	if transport_name == "ollama":
		return f"ollama(model={model_label})"
	if transport_name == "gemini":
		return "gemini(cli)"
	if transport_name == "auto":
		return f"gemini(cli) -> ollama(model={model_label})"
	return transport_name


#============================================
def create_llm_client(
	transport_name: str,
	model_override: str = "",
	gemini_command: str = "gemini",
	ollama_base_url: str = "http://localhost:11434",
	log_fn=None,
) -> LLMClient:
	"""
	Create an LLMClient for the selected transport name.
	"""
	transports = []
	if transport_name == "gemini":
		transports.append(GeminiCliTransport(command=gemini_command, model=model_override))
	elif transport_name == "ollama":
		if not model_override:
			raise RuntimeError("The ollama transport needs a model name.")
		transports.append(OllamaTransport(model=model_override, base_url=ollama_base_url))
	elif transport_name == "auto":
		transports.append(GeminiCliTransport(command=gemini_command))
		if model_override:
			transports.append(OllamaTransport(model=model_override, base_url=ollama_base_url))
	else:
		raise RuntimeError(f"Unsupported llm transport: {transport_name}")
	return LLMClient(transports=transports, log_fn=log_fn)
