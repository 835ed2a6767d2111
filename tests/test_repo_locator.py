import os

from standuplib import repo_locator
from standuplib.report_models import FailureKind


#============================================
def make_repo(path) -> None:
	"""
	Create a directory with an empty .git marker directory.
	"""
	(path / ".git").mkdir(parents=True)


#============================================
def test_find_repos_root_and_children(tmp_path) -> None:
	"""
	Root repo comes first, then child repos in name order.
	"""
	make_repo(tmp_path)
	make_repo(tmp_path / "zeta")
	make_repo(tmp_path / "alpha")
	(tmp_path / "plain_dir").mkdir()
	result = repo_locator.find_repos(str(tmp_path))
	assert result.ok
	assert result.value == [
		str(tmp_path),
		os.path.join(str(tmp_path), "alpha"),
		os.path.join(str(tmp_path), "zeta"),
	]


#============================================
def test_find_repos_skips_node_modules_and_marker(tmp_path) -> None:
	"""
	node_modules and the .git directory itself are never candidates.
	"""
	make_repo(tmp_path / "node_modules")
	make_repo(tmp_path / ".git")
	result = repo_locator.find_repos(str(tmp_path))
	# tmp_path/.git/.git exists, but .git is skipped as a child name;
	# tmp_path itself now has a .git marker, so it is the only repo
	assert result.value == [str(tmp_path)]


#============================================
def test_find_repos_does_not_recurse(tmp_path) -> None:
	"""
	Repos two levels below the root are out of reach.
	"""
	make_repo(tmp_path / "group" / "nested")
	result = repo_locator.find_repos(str(tmp_path))
	assert result.ok
	assert result.value == []


#============================================
def test_find_repos_ignores_files(tmp_path) -> None:
	"""
	Regular files next to repos are not scanned.
	"""
	(tmp_path / "notes.txt").write_text("x", encoding="utf-8")
	make_repo(tmp_path / "app")
	result = repo_locator.find_repos(str(tmp_path))
	assert result.value == [os.path.join(str(tmp_path), "app")]


#============================================
def test_find_repos_unlistable_root_degrades(tmp_path) -> None:
	"""
	A root that cannot be listed yields no repos and a failure kind.
	"""
	messages = []
	result = repo_locator.find_repos(str(tmp_path / "missing"), log_fn=messages.append)
	assert result.value == []
	assert result.failure == FailureKind.UNREADABLE_DIRECTORY
	assert any("Skipping unreadable directory" in message for message in messages)


#============================================
def test_find_repos_warns_on_shared_root_name(tmp_path) -> None:
	"""
	A child repo named like the root repo is kept and flagged in the log.
	"""
	root = tmp_path / "tool"
	make_repo(root)
	make_repo(root / "tool")
	messages = []
	result = repo_locator.find_repos(str(root), log_fn=messages.append)
	assert result.value == [str(root), os.path.join(str(root), "tool")]
	assert any(message.startswith("Warning: repo name tool is shared") for message in messages)


#============================================
def test_find_repos_no_warning_for_distinct_names(tmp_path) -> None:
	"""
	Distinct root and child names log no shared-name warning.
	"""
	make_repo(tmp_path)
	make_repo(tmp_path / "other")
	messages = []
	repo_locator.find_repos(str(tmp_path), log_fn=messages.append)
	assert not any(message.startswith("Warning:") for message in messages)
