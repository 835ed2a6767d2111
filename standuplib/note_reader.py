import os
from datetime import date
from datetime import timedelta

from standuplib.report_models import FailureKind
from standuplib.report_models import NoteEntry
from standuplib.report_models import SourceResult


DEFAULT_NOTES_DIR = "memory"
DEFAULT_NOTES_EXTENSION = "md"


#============================================
def build_window_dates(days: int, today: date) -> list[str]:
	"""
	Return ISO dates from today back through days-1 days ago.
	"""
	return [(today - timedelta(days=offset)).isoformat() for offset in range(days)]


#============================================
def candidate_note_paths(
	date_text: str,
	workspace: str,
	cwd: str,
	notes_dir: str = DEFAULT_NOTES_DIR,
	extension: str = DEFAULT_NOTES_EXTENSION,
) -> list[str]:
	"""
	Note file locations for one date, workspace first then cwd.
	"""
	filename = f"{date_text}.{extension.lstrip('.')}"
	paths = [os.path.join(workspace, notes_dir, filename)]
	cwd_path = os.path.join(cwd, notes_dir, filename)
	if cwd_path not in paths:
		paths.append(cwd_path)
	return paths


#============================================
def read_notes(
	days: int,
	workspace: str,
	today: date,
	cwd: str | None = None,
	notes_dir: str = DEFAULT_NOTES_DIR,
	extension: str = DEFAULT_NOTES_EXTENSION,
	log_fn=None,
) -> SourceResult:
	"""
	Load dated note files for the trailing window.

	Each date in the window maps to `<notes_dir>/<YYYY-MM-DD>.<extension>`
	under the workspace, falling back to the same path under cwd. Dates
	without a file are skipped. A file that exists but cannot be read is
	skipped too and reported as NOTE_UNREADABLE.

	Args:
		days: trailing window size in days.
		workspace: configured workspace directory.
		today: last day of the window.
		cwd: fallback base directory (defaults to the process cwd).
		notes_dir: notes subdirectory name.
		extension: note file extension.
		log_fn: optional callable for progress logging.

	Returns:
		SourceResult whose value is a list of NoteEntry, today first.
	"""
	base_cwd = cwd or os.getcwd()
	entries: list[NoteEntry] = []
	problems: list[str] = []
	for date_text in build_window_dates(days, today):
		for path in candidate_note_paths(date_text, workspace, base_cwd, notes_dir, extension):
			if not os.path.isfile(path):
				continue
			try:
				with open(path, "r", encoding="utf-8") as handle:
					content = handle.read()
			except (OSError, UnicodeDecodeError) as error:
				problems.append(f"{path}: {error}")
				if log_fn:
					log_fn(f"Skipping unreadable note {path}: {error}")
				break
			entries.append(NoteEntry(date=date_text, content=content))
			break

	if log_fn:
		log_fn(f"Found {len(entries)} note file(s) for the last {days} day(s).")
	if problems:
		return SourceResult(
			value=entries,
			failure=FailureKind.NOTE_UNREADABLE,
			detail="; ".join(problems),
		)
	return SourceResult(value=entries)
