import os

from standuplib.report_models import FailureKind
from standuplib.report_models import SourceResult


GIT_MARKER = ".git"
SKIPPED_DIR_NAMES = {GIT_MARKER, "node_modules"}


#============================================
def is_git_repo(path: str) -> bool:
	"""
	Return True when the directory holds a .git marker.
	"""
	return os.path.exists(os.path.join(path, GIT_MARKER))


#============================================
def find_repos(workspace: str, log_fn=None) -> SourceResult:
	"""
	Find git repositories at the workspace root and one level below it.

	The root itself counts when it carries a .git marker. Immediate child
	directories count the same way; there is no deeper recursion. A root
	that cannot be listed still reports the root repo (if any) with an
	UNREADABLE_DIRECTORY failure attached.

	Args:
		workspace: directory to scan.
		log_fn: optional callable for progress logging.

	Returns:
		SourceResult whose value is a list of absolute repository paths,
		root first, then children in name order.
	"""
	root = os.path.abspath(workspace)
	repos: list[str] = []
	if is_git_repo(root):
		repos.append(root)

	try:
		with os.scandir(root) as iterator:
			entries = sorted(iterator, key=lambda entry: entry.name)
	except OSError as error:
		if log_fn:
			log_fn(f"Skipping unreadable directory {root}: {error}")
		return SourceResult(
			value=repos,
			failure=FailureKind.UNREADABLE_DIRECTORY,
			detail=str(error),
		)

	for entry in entries:
		if entry.name in SKIPPED_DIR_NAMES:
			continue
		try:
			if not entry.is_dir():
				continue
		except OSError:
			continue
		child_path = os.path.join(root, entry.name)
		if is_git_repo(child_path):
			repos.append(child_path)

	# children are unique by name, so only the root can collide
	root_name = os.path.basename(root)
	if log_fn and repos and repos[0] == root and os.path.join(root, root_name) in repos:
		log_fn(
			f"Warning: repo name {root_name} is shared by the workspace root and a "
			+ "child repo; their commits are listed together."
		)

	if log_fn:
		log_fn(f"Found {len(repos)} repo(s) under {root}")
	return SourceResult(value=repos)
