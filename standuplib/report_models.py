"""Shared records for one standup report run.

Commit records and note entries are produced by the collectors, merged by
report_builder into a StandupReport, and consumed once by report_render.
"""

import enum
from dataclasses import dataclass
from dataclasses import field


#============================================
class FailureKind(enum.Enum):
	"""
	Non-fatal failure categories a collector can report.
	"""
	UNREADABLE_DIRECTORY = "unreadable_directory"
	LOG_QUERY_FAILED = "log_query_failed"
	NOTE_UNREADABLE = "note_unreadable"
	AI_SERVICE_FAILED = "ai_service_failed"


#============================================
@dataclass(frozen=True)
class SourceResult:
	"""
	A collected value plus the failure that degraded it, if any.
	"""
	value: object
	failure: FailureKind | None = None
	detail: str = ""

	@property
	def ok(self) -> bool:
		return self.failure is None


#============================================
@dataclass(frozen=True)
class CommitRecord:
	hash: str
	date: str
	msg: str
	repo: str


#============================================
@dataclass(frozen=True)
class NoteEntry:
	date: str
	content: str


#============================================
@dataclass(frozen=True)
class ReportStats:
	repos_touched: int
	total_commits: int
	memory_entries: int


#============================================
@dataclass(frozen=True)
class StandupReport:
	"""
	Aggregate root for one run: window, author filter, stats and records.
	"""
	days: int
	author: str
	stats: ReportStats
	commits: tuple[CommitRecord, ...] = field(default_factory=tuple)
	memory: tuple[NoteEntry, ...] = field(default_factory=tuple)

	@property
	def range_text(self) -> str:
		return f"{self.days} days"
