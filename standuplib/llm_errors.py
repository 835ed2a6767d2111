"""
Exceptions raised by text-generation transports.
"""


#============================================
class LLMError(RuntimeError):
	"""
	Base class for text-generation failures.
	"""


#============================================
class TransportUnavailableError(LLMError):
	"""
	Raised when a transport cannot be reached or executed at all.
	"""


#============================================
class LLMCallError(LLMError):
	"""
	Raised when a transport ran but returned an error or no content.
	"""
