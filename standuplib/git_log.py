"""Commit extraction from local git repositories.

GitLogSource runs one `git log` query per repository and parses the
`hash|date|subject` lines into CommitRecord values. Any other object with a
matching `query(repo_path, days, author, today)` method can stand in for it.
"""

import os
import re
import subprocess
from datetime import date
from datetime import timedelta

from standuplib.report_models import CommitRecord
from standuplib.report_models import FailureKind
from standuplib.report_models import SourceResult


FIELD_SEPARATOR = "|"
LOG_FORMAT = "%h|%ad|%s"
BASIC_REGEX_SPECIALS = set("\\.[]*^$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


#============================================
def window_start_date(days: int, today: date) -> date:
	"""
	First calendar day inside a trailing window of `days` days.
	"""
	if days < 1:
		raise RuntimeError("window days must be >= 1")
	return today - timedelta(days=days - 1)


#============================================
def author_pattern(author: str) -> str:
	"""
	Build an anchored git --author pattern matching exactly one name.

	git matches --author against "Name <email>" as a basic regex, so the
	name is escaped and anchored between the line start and the email.
	"""
	escaped = "".join("\\" + char if char in BASIC_REGEX_SPECIALS else char for char in author)
	return f"^{escaped} <"


#============================================
def build_git_log_command(days: int, author: str, today: date) -> list[str]:
	"""
	Build the git log argument list for one repository query.
	"""
	since_text = window_start_date(days, today).isoformat()
	command = [
		"git",
		"log",
		f"--since={since_text} 00:00",
		f"--pretty=format:{LOG_FORMAT}",
		"--date=short",
		"--no-merges",
	]
	if author:
		# pin basic regex syntax whatever grep.patternType says
		command.append("--basic-regexp")
		command.append(f"--author={author_pattern(author)}")
	return command


#============================================
def parse_log_line(line: str, repo_name: str) -> CommitRecord:
	"""
	Split one log line into a commit record.

	A subject containing the separator shifts the remaining text out of the
	message field; lines with fewer than three fields leave the missing
	fields empty.
	"""
	parts = line.split(FIELD_SEPARATOR)
	while len(parts) < 3:
		parts.append("")
	return CommitRecord(hash=parts[0], date=parts[1], msg=parts[2], repo=repo_name)


#============================================
def parse_log_output(output: str, repo_name: str) -> list[CommitRecord]:
	"""
	Parse full git log output into commit records in log order.
	"""
	text = output.strip()
	if not text:
		return []
	records = []
	for line in text.splitlines():
		records.append(parse_log_line(line, repo_name))
	return records


#============================================
def filter_commits_to_window(
	commits: list[CommitRecord],
	days: int,
	today: date,
) -> list[CommitRecord]:
	"""
	Drop records dated outside the trailing window, keeping order.

	Records whose date field is not an ISO date (malformed log lines) are
	passed through untouched.
	"""
	start_text = window_start_date(days, today).isoformat()
	end_text = today.isoformat()
	kept = []
	for commit in commits:
		if DATE_RE.match(commit.date) and not (start_text <= commit.date <= end_text):
			continue
		kept.append(commit)
	return kept


#============================================
class GitLogSource:
	"""
	Log source backed by the git executable.
	"""

	def __init__(self, run_fn=None):
		self.run_fn = run_fn or subprocess.run

	#============================================
	def query(self, repo_path: str, days: int, author: str, today: date) -> SourceResult:
		"""
		Return a SourceResult with the repository's commits in the window.
		"""
		repo_name = os.path.basename(os.path.normpath(repo_path))
		command = build_git_log_command(days, author, today)
		try:
			result = self.run_fn(
				command,
				cwd=repo_path,
				capture_output=True,
				text=True,
				check=False,
			)
		except OSError as error:
			return SourceResult(
				value=[],
				failure=FailureKind.LOG_QUERY_FAILED,
				detail=f"Could not run git in {repo_path}: {error}",
			)
		if result.returncode != 0:
			err_text = (result.stderr or "").strip() or "unknown git error"
			return SourceResult(
				value=[],
				failure=FailureKind.LOG_QUERY_FAILED,
				detail=f"git log failed in {repo_path}: {err_text}",
			)
		return SourceResult(value=parse_log_output(result.stdout or "", repo_name))


#============================================
def extract_commits(
	log_source,
	repo_path: str,
	days: int,
	author: str,
	today: date,
	log_fn=None,
) -> SourceResult:
	"""
	Query one repository and clamp its records to the window.
	"""
	result = log_source.query(repo_path, days, author, today)
	if not result.ok:
		if log_fn:
			log_fn(f"Skipping repo {repo_path}: {result.detail}")
		return SourceResult(value=[], failure=result.failure, detail=result.detail)
	commits = filter_commits_to_window(list(result.value), days, today)
	if log_fn:
		log_fn(f"Repo {os.path.basename(repo_path)}: collected {len(commits)} commit(s).")
	return SourceResult(value=commits)
